"""Error hierarchy for thinkwire.

Configuration and payload-shape failures are raised by the request and
response adapters themselves. Provider errors are raised by the transport,
which maps HTTP status codes to typed exceptions carrying retryability
information for the caller to act on.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class SDKError(Exception):
    """Base exception for all thinkwire errors."""

    @property
    def is_retryable(self) -> bool:
        """Whether this error is safe to retry."""
        return False


class ConfigurationError(SDKError):
    """A required collaborator or setting is missing or invalid."""


class MalformedResponseError(SDKError):
    """A provider payload lacks structurally required fields.

    Attributes:
        fields: Dotted paths of every missing or invalid field.
        payload: The offending payload, kept for diagnosis.
    """

    def __init__(
        self,
        fields: Iterable[str],
        *,
        payload: Any = None,
    ) -> None:
        self.fields = tuple(fields)
        self.payload = payload
        super().__init__(
            "Malformed response payload: missing or invalid "
            + ", ".join(repr(f) for f in self.fields)
        )


class NetworkError(SDKError):
    """Network-level failure (connection refused, DNS, etc.)."""

    @property
    def is_retryable(self) -> bool:
        return True


class ProviderError(SDKError):
    """Base class for errors returned by an LLM provider.

    Attributes:
        provider: Which provider returned the error.
        status_code: HTTP status code, if applicable.
        error_code: Provider-specific error code.
        retryable: Whether this error is safe to retry.
        retry_after: Seconds to wait before retrying.
        raw: Raw error response body from the provider.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status_code: int | None = None,
        error_code: str | None = None,
        retryable: bool = False,
        retry_after: float | None = None,
        raw: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.error_code = error_code
        self.retryable = retryable
        self.retry_after = retry_after
        self.raw = raw

    @property
    def is_retryable(self) -> bool:
        return self.retryable


class AuthenticationError(ProviderError):
    """401: Invalid API key or expired token."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)


class AccessDeniedError(ProviderError):
    """403: Insufficient permissions."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)


class NotFoundError(ProviderError):
    """404: Model not found, endpoint not found."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)


class RateLimitError(ProviderError):
    """429: Rate limit exceeded."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class ServerError(ProviderError):
    """500-599: Provider internal error."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class RequestTimeoutError(ProviderError):
    """Request timed out."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class InvalidRequestError(ProviderError):
    """400/422: Malformed request, invalid parameters."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)


class ContextLengthError(ProviderError):
    """413: Input + output exceeds context window."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)


# ---------------------------------------------------------------------------
# HTTP status code mapping
# ---------------------------------------------------------------------------

_STATUS_TO_ERROR: dict[int, type[ProviderError]] = {
    400: InvalidRequestError,
    401: AuthenticationError,
    403: AccessDeniedError,
    404: NotFoundError,
    408: RequestTimeoutError,
    413: ContextLengthError,
    422: InvalidRequestError,
    429: RateLimitError,
    500: ServerError,
    502: ServerError,
    503: ServerError,
    504: ServerError,
}


def error_from_status(
    status_code: int,
    message: str,
    *,
    provider: str = "",
    error_code: str | None = None,
    raw: dict[str, Any] | None = None,
    retry_after: float | None = None,
) -> ProviderError:
    """Create the appropriate ProviderError subclass from an HTTP status code.

    Unknown 5xx codes map to ServerError; any other unknown code yields a
    plain, retryable ProviderError.

    Args:
        status_code: HTTP status code from the provider response.
        message: Error message.
        provider: Provider name.
        error_code: Provider-specific error code from the body.
        raw: Raw error response body.
        retry_after: Seconds to wait before retrying (from Retry-After header).

    Returns:
        An instance of the appropriate ProviderError subclass.
    """
    cls = _STATUS_TO_ERROR.get(status_code)
    if cls is None and 500 <= status_code < 600:
        cls = ServerError
    kwargs: dict[str, Any] = {
        "provider": provider,
        "status_code": status_code,
        "error_code": error_code,
        "raw": raw,
        "retry_after": retry_after,
    }
    if cls is None:
        return ProviderError(message, retryable=True, **kwargs)
    return cls(message, **kwargs)
