"""Tests for lookup request/result types and the rxcui.json schema."""

from __future__ import annotations

import dataclasses

import pytest

from rxnormalizer.models import (
    IdGroup,
    LookupRequest,
    LookupResult,
    RxcuiResponse,
    SearchMode,
)


class TestSearchMode:
    """Tests for SearchMode mapping."""

    def test_normalize_maps_to_approximate(self) -> None:
        assert SearchMode.from_normalize(True) is SearchMode.NORMALIZED
        assert SearchMode.NORMALIZED.value == "2"

    def test_exact_maps_to_zero(self) -> None:
        assert SearchMode.from_normalize(False) is SearchMode.EXACT
        assert SearchMode.EXACT.value == "0"


class TestLookupRequest:
    """Tests for LookupRequest."""

    def test_params(self) -> None:
        request = LookupRequest("Vit-C ", normalize=True)
        assert request.params == {"name": "Vit-C ", "search": "2"}
        assert request.search_mode is SearchMode.NORMALIZED

    def test_default_is_exact(self) -> None:
        assert LookupRequest("aspirin").params["search"] == "0"

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="drug_name is required"):
            LookupRequest("")

    def test_frozen(self) -> None:
        request = LookupRequest("aspirin")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.normalize = True  # type: ignore[misc]


class TestLookupResult:
    """Tests for LookupResult."""

    def test_not_found(self) -> None:
        result = LookupResult.not_found(LookupRequest("vit-c"))
        assert result.rxcuis is None
        assert not result.found

    def test_found(self) -> None:
        result = LookupResult(LookupRequest("vit-c", True), rxcuis=(1088438, 1151))
        assert result.found

    def test_empty_found_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one RxCUI"):
            LookupResult(LookupRequest("vit-c"), rxcuis=())


class TestRxcuiResponse:
    """Tests for the pydantic wire schema."""

    def test_alias_decoding(self) -> None:
        payload = RxcuiResponse.model_validate(
            {"idGroup": {"name": "vit-c", "rxnormId": ["1088438", "1151"]}}
        )
        assert payload.id_group == IdGroup(name="vit-c", rxnorm_id=["1088438", "1151"])
        assert payload.rxnorm_ids == ["1088438", "1151"]

    @pytest.mark.parametrize(
        "body",
        [
            "{}",
            '{"idGroup":null}',
            '{"idGroup":{}}',
            '{"idGroup":{"name":"vit-c","rxnormId":null}}',
        ],
    )
    def test_absent_ids_are_empty(self, body: str) -> None:
        assert RxcuiResponse.model_validate_json(body).rxnorm_ids == []
