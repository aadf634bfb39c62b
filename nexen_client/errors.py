"""Client error hierarchy.

All client-specific errors extend NexenClientError. Transport failures and
server rejections are normalised here so that read queries can expose them via
``error`` and mutations can re-raise them, with one shape for both:
a human-readable ``message``, an HTTP-ish ``status_code`` and optional
field-level validation errors.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class NexenClientError(Exception):
    """Base error for all client-side errors."""

    status_code: int = 500
    message: str = "An unknown error occurred."

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)

    def to_envelope(self) -> dict:
        """Render the error as a failure envelope."""
        return {
            "success": False,
            "message": self.message,
            "data": None,
            "errors": self.details.get("field_errors") or None,
        }


class ConfigurationError(NexenClientError):
    """Invalid or missing client configuration (settings, invalidation table)."""

    message = "Invalid client configuration"


class UnknownMutationError(ConfigurationError):
    """A mutation was bound without an entry in the invalidation table."""

    message = "No invalidation rule declared for mutation"


class TransportError(NexenClientError):
    """Network unreachable, connection refused or request timed out."""

    status_code = 503
    message = "No response received from server. Please check your network connection."


class FetchCancelledError(NexenClientError):
    """The shared request was cancelled (cache cleared) while a caller awaited it."""

    status_code = 499
    message = "The request was cancelled before it completed."


class ServerRejectedError(NexenClientError):
    """Non-2xx response from the API; keeps the server message verbatim."""

    status_code = 500
    message = "The server rejected the request."

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        field_errors: dict[str, list[str]] | None = None,
        **kwargs: object,
    ) -> None:
        super().__init__(message, field_errors=field_errors, **kwargs)
        if status_code is not None:
            self.status_code = status_code
        self.field_errors: dict[str, list[str]] = field_errors or {}


class AuthenticationError(ServerRejectedError):
    """Missing, expired or invalid session token."""

    status_code = 401
    message = "Unauthenticated"


class PermissionDeniedError(ServerRejectedError):
    """Authenticated but not allowed to perform the action."""

    status_code = 403
    message = "You do not have permission to perform this action"


class NotFoundError(ServerRejectedError):
    """Requested resource does not exist."""

    status_code = 404
    message = "Resource not found"


class ValidationFailedError(ServerRejectedError):
    """Server-side validation failed; ``field_errors`` carries the details."""

    status_code = 422
    message = "Validation error"


class ResponseDecodeError(ServerRejectedError):
    """A 2xx body that is not a valid envelope for the expected payload."""

    status_code = 502
    message = "Malformed response from server"


_STATUS_ERRORS: dict[int, type[ServerRejectedError]] = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    422: ValidationFailedError,
}


def error_for_status(
    status_code: int,
    message: str | None = None,
    field_errors: dict[str, list[str]] | None = None,
) -> ServerRejectedError:
    """Build the ServerRejectedError subclass matching an HTTP status code."""
    cls = _STATUS_ERRORS.get(status_code, ServerRejectedError)
    return cls(message, status_code=status_code, field_errors=field_errors)
