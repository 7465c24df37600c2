"""Request, result and wire-schema types for RxCUI lookups."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchMode(str, Enum):
    """Value of the RxNav ``search`` query parameter."""

    EXACT = "0"
    NORMALIZED = "2"

    @classmethod
    def from_normalize(cls, normalize: bool) -> SearchMode:
        """Map the ``normalize`` flag to its wire value."""
        return cls.NORMALIZED if normalize else cls.EXACT


@dataclass(frozen=True)
class LookupRequest:
    """A single drug-name lookup.

    Attributes:
        drug_name: Free-text drug name, sent verbatim as ``name``.
        normalize: Use RxNav's approximate matching instead of exact search.
    """

    drug_name: str
    normalize: bool = False

    def __post_init__(self) -> None:
        if not self.drug_name:
            raise ValueError("drug_name is required")

    @property
    def search_mode(self) -> SearchMode:
        return SearchMode.from_normalize(self.normalize)

    @property
    def params(self) -> dict[str, str]:
        """Query parameters for the rxcui.json endpoint."""
        return {"name": self.drug_name, "search": self.search_mode.value}


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a lookup: the RxCUIs found, or ``None`` when RxNav has no match.

    Identifiers keep the order RxNav returned them in, duplicates included.
    A found result always holds at least one identifier.
    """

    request: LookupRequest
    rxcuis: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        if self.rxcuis is not None and not self.rxcuis:
            raise ValueError("a found result needs at least one RxCUI")

    @property
    def found(self) -> bool:
        return self.rxcuis is not None

    @classmethod
    def not_found(cls, request: LookupRequest) -> LookupResult:
        return cls(request=request, rxcuis=None)


# ---------------------------------------------------------------------------
# Wire schema
# ---------------------------------------------------------------------------


class IdGroup(BaseModel):
    """The ``idGroup`` object of an rxcui.json response.

    Response structure:
    {
      "idGroup": {
        "name": "vit-c",
        "rxnormId": ["1088438", "1151"]
      }
    }

    ``rxnormId`` is absent or null when nothing matched.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: str | None = None
    rxnorm_id: list[str] | None = Field(default=None, alias="rxnormId")


class RxcuiResponse(BaseModel):
    """Top-level rxcui.json response. Fields other than ``idGroup`` are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    id_group: IdGroup | None = Field(default=None, alias="idGroup")

    @property
    def rxnorm_ids(self) -> list[str]:
        """Raw identifier strings, empty when the path is missing or null."""
        if self.id_group is None or self.id_group.rxnorm_id is None:
            return []
        return self.id_group.rxnorm_id
