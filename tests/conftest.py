"""Pytest configuration for rxnormalizer tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest
from dotenv import load_dotenv

# Load .env so RXNORM_LIVE_TESTS can enable the live RxNav tests.
load_dotenv()

STUB_URL = "http://rxnav.test/REST/rxcui.json"

Outcome = httpx.Response | type[httpx.TransportError]


class StubRxNav:
    """Scripted rxcui.json endpoint for ``httpx.MockTransport``.

    Each outcome is either an ``httpx.Response`` to return or a
    ``httpx.TransportError`` subclass to raise for that request.
    """

    def __init__(self, *outcomes: Outcome) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.outcomes:
            raise AssertionError(f"unexpected extra request: {request.url}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, httpx.Response):
            return outcome
        raise outcome("simulated transport failure", request=request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def ok(payload: object) -> httpx.Response:
    return httpx.Response(200, json=payload)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RXNORM_BASE_URL",
        "RXNORM_TIMEOUT_SECONDS",
        "RXNORM_RETRY_DELAY_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def no_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep so retries never wait."""
    return AsyncMock(return_value=None)

