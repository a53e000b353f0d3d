"""Enrichment error types."""

from __future__ import annotations

from enum import Enum


class EnrichmentErrorCode(Enum):
    """Error classification codes."""

    AUTH_FAILED = "auth_failed"
    UPSTREAM_FAILED = "upstream_failed"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    VALIDATION_FAILED = "validation_failed"
    NOT_CONFIGURED = "not_configured"


class EnrichmentError(Exception):
    """Enrichment exception with error code and retryable flag.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether repeating the call later may succeed.
    """

    default_code = EnrichmentErrorCode.UPSTREAM_FAILED

    def __init__(
        self,
        message: str,
        code: EnrichmentErrorCode | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.retryable = retryable


class AuthFailure(EnrichmentError):
    """Access token could not be obtained, or was rejected twice."""

    default_code = EnrichmentErrorCode.AUTH_FAILED


class UpstreamRequestFailure(EnrichmentError):
    """Non-success response or malformed payload on a single data call."""

    default_code = EnrichmentErrorCode.UPSTREAM_FAILED


class TimeoutFailure(EnrichmentError):
    """Request exceeded its timeout bound."""

    default_code = EnrichmentErrorCode.TIMEOUT

    def __init__(self, message: str, code: EnrichmentErrorCode | None = None) -> None:
        super().__init__(message, code, retryable=True)


class ValidationFailure(EnrichmentError):
    """Ticker or candidate input is absent or malformed."""

    default_code = EnrichmentErrorCode.VALIDATION_FAILED
