"""Exception hierarchy for RxNav identifier lookups.

NotFound is a normal lookup result, not an error; everything here means the
call itself failed.
"""

from __future__ import annotations


class RxNormError(Exception):
    """Base exception for all RxNav lookup errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        """Initialize RxNav lookup error.

        Args:
            message: Error message.
            status_code: HTTP status code if a response was received.
            response_body: Truncated response body if applicable.
        """
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(self.message)


class RxNormTransportError(RxNormError):
    """No HTTP response after the initial attempt and the single retry."""


class RxNormRemoteError(RxNormError):
    """RxNav answered with a non-2xx status."""


class RxNormClientError(RxNormRemoteError):
    """4xx responses."""


class RxNormServerError(RxNormRemoteError):
    """5xx responses."""


class RxNormParseError(RxNormError):
    """Response body is not the expected JSON or holds a non-integer RxCUI."""
