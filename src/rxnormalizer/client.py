"""Async RxCUI lookup client for the NLM RxNav REST API.

Wraps the ``/REST/rxcui.json`` endpoint: a drug name goes in, the RxCUIs
RxNav associates with it come out. Transport failures are retried exactly
once after a fixed delay (tenacity); any HTTP response ends the retry loop.

No API key required.

Environment variables:
- RXNORM_BASE_URL: Endpoint override (optional; defaults to
  https://rxnav.nlm.nih.gov/REST/rxcui.json).
- RXNORM_TIMEOUT_SECONDS: HTTP timeout for an owned client (optional;
  default 10).
- RXNORM_RETRY_DELAY_SECONDS: Delay before the single retry (optional;
  default 1).
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from collections.abc import Awaitable, Callable
from types import TracebackType

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from rxnormalizer.errors import (
    RxNormClientError,
    RxNormParseError,
    RxNormRemoteError,
    RxNormServerError,
    RxNormTransportError,
)
from rxnormalizer.models import LookupRequest, LookupResult, RxcuiResponse

logger = logging.getLogger(__name__)

RXNAV_DEFAULT_URL = "https://rxnav.nlm.nih.gov/REST/rxcui.json"

_DEFAULT_TIMEOUT = 10.0
_DEFAULT_RETRY_DELAY = 1.0
# Initial attempt plus one retry
_MAX_ATTEMPTS = 2
_RXCUI_PATTERN = re.compile(r"[0-9]+")

SleepFn = Callable[[float], Awaitable[None]]


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back on missing/invalid values."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, value, default)
        return default


class RxNormClient:
    """Async client for RxNav RxCUI lookups.

    Uses an ``httpx.AsyncClient`` for transport (caller-supplied or owned)
    and tenacity for the single fixed-delay retry on transport errors.

    Args:
        http_client: Shared HTTP client. When omitted the client creates one
            and closes it in ``aclose``; a supplied client is never closed.
        base_url: Endpoint URL of rxcui.json.
        timeout: HTTP timeout in seconds for an owned client.
        retry_delay: Seconds to wait before retrying a transport failure.
        normalize: Default search mode for ``lookup``.
        sleep: Async sleep used for the retry delay.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        retry_delay: float | None = None,
        normalize: bool = False,
        sleep: SleepFn | None = None,
    ) -> None:
        """Initialize the RxNav client configuration."""
        self.base_url: str = (
            base_url or os.getenv("RXNORM_BASE_URL") or RXNAV_DEFAULT_URL
        )
        self.timeout = (
            timeout
            if timeout is not None
            else _env_float("RXNORM_TIMEOUT_SECONDS", _DEFAULT_TIMEOUT)
        )
        self.retry_delay = (
            retry_delay
            if retry_delay is not None
            else _env_float("RXNORM_RETRY_DELAY_SECONDS", _DEFAULT_RETRY_DELAY)
        )
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")
        self.normalize = normalize
        self._sleep: SleepFn = sleep or asyncio.sleep
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self.timeout)

    # -- Context manager --------------------------------------------------

    async def __aenter__(self) -> RxNormClient:
        """Enter async context manager scope."""
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc: BaseException | None,
        _tb: TracebackType | None,
    ) -> None:
        """Exit async context manager scope and close owned resources."""
        await self.aclose()

    # -- Public API --------------------------------------------------------

    async def lookup(
        self, drug_name: str, normalize: bool | None = None
    ) -> LookupResult:
        """Look up the RxCUIs for a drug name.

        Args:
            drug_name: Free-text drug name, sent as-is.
            normalize: Override the client's search mode for this call.
                ``True`` asks RxNav for approximate matching (search=2),
                ``False`` for exact matching (search=0).

        Returns:
            A LookupResult; ``result.rxcuis`` is None when RxNav has no match.

        Raises:
            ValueError: If the drug name is empty.
            RxNormTransportError: If both attempts fail before a response.
            RxNormRemoteError: If RxNav returns a non-2xx status.
            RxNormParseError: If the body is malformed or an RxCUI is not
                an integer.
        """
        request = LookupRequest(
            drug_name=drug_name,
            normalize=self.normalize if normalize is None else normalize,
        )
        response = await self._send_with_retry(request)
        if not response.is_success:
            raise self._map_http_error(response)
        result = self._parse_response(response.content, request)
        if not result.found:
            logger.debug(
                "No RxCUI for %r (search=%s)", drug_name, request.search_mode.value
            )
        return result

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    # -- Internal ----------------------------------------------------------

    async def _send_with_retry(self, request: LookupRequest) -> httpx.Response:
        """GET rxcui.json, retrying once after ``retry_delay`` on transport errors."""
        retrying = AsyncRetrying(
            sleep=self._sleep,
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(_MAX_ATTEMPTS),
            wait=wait_fixed(self.retry_delay),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    logger.debug(
                        "GET %s name=%r search=%s (attempt %d)",
                        self.base_url,
                        request.drug_name,
                        request.search_mode.value,
                        attempt.retry_state.attempt_number,
                    )
                    response = await self._http.get(
                        self.base_url,
                        params=request.params,
                        headers={"Accept": "application/json"},
                    )
        except httpx.TransportError as exc:
            raise RxNormTransportError(
                message=f"RxNav unreachable after {_MAX_ATTEMPTS} attempts: {exc}"
            ) from exc
        return response

    def _log_retry(self, retry_state: RetryCallState) -> None:
        """Log the transport failure that is about to be retried."""
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "RxNav request failed with %s, retrying in %.1fs",
            type(exc).__name__ if exc else "error",
            self.retry_delay,
        )

    @staticmethod
    def _map_http_error(response: httpx.Response) -> RxNormRemoteError:
        """Map a non-2xx response to the matching remote error."""
        status = response.status_code
        body = response.text[:500]

        if 400 <= status < 500:
            return RxNormClientError(
                message=f"Client error {status}: {body}",
                status_code=status,
                response_body=body,
            )
        if status >= 500:
            return RxNormServerError(
                message=f"Server error {status}: {body}",
                status_code=status,
                response_body=body,
            )
        return RxNormRemoteError(
            message=f"Unexpected status {status}: {body}",
            status_code=status,
            response_body=body,
        )

    @staticmethod
    def _parse_response(body: str | bytes, request: LookupRequest) -> LookupResult:
        """Decode an rxcui.json body into a LookupResult.

        A missing, null or empty ``idGroup.rxnormId`` is NotFound. Every
        entry must be an unsigned decimal string; one bad entry fails the
        whole lookup.
        """
        try:
            payload = RxcuiResponse.model_validate_json(body)
        except ValidationError as exc:
            raise RxNormParseError(
                message=f"Malformed rxcui.json response: {exc}",
                response_body=_truncate(body),
            ) from exc

        raw_ids = payload.rxnorm_ids
        if not raw_ids:
            return LookupResult.not_found(request)

        rxcuis: list[int] = []
        for fragment in raw_ids:
            if not _RXCUI_PATTERN.fullmatch(fragment):
                raise RxNormParseError(
                    message=f"Invalid RxCUI {fragment!r} in idGroup.rxnormId",
                    response_body=_truncate(body),
                )
            rxcuis.append(int(fragment))
        return LookupResult(request=request, rxcuis=tuple(rxcuis))


def _truncate(body: str | bytes) -> str:
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    return text[:500]


# ---------------------------------------------------------------------------
# Factory and convenience entry point
# ---------------------------------------------------------------------------


def get_rxnorm_client(**kwargs: object) -> RxNormClient:
    """Create an RxNormClient using environment configuration.

    Keyword arguments are passed through to ``RxNormClient`` and override
    the environment.

    Returns:
        Configured RxNormClient instance owning its HTTP client.
    """
    return RxNormClient(**kwargs)  # type: ignore[arg-type]


async def find_rxcui(drug_name: str, normalize: bool) -> list[int] | None:
    """Find the RxCUIs for a drug name with a short-lived client.

    Example::

        ids = await find_rxcui("vit-c", normalize=True)
        # [1088438, 1151]

    Returns:
        The identifiers in RxNav order, or None when nothing matched.
    """
    async with get_rxnorm_client(normalize=normalize) as client:
        result = await client.lookup(drug_name)
    return list(result.rxcuis) if result.rxcuis is not None else None
