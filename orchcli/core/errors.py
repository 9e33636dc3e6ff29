"""Error taxonomy shared by every orch-cli command.

Every error a command can surface derives from :class:`OrchError`.  The
top-level CLI prints ``str(exc)`` verbatim to stderr and exits non-zero.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Stable vocabulary for classifying command failures."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    GENERIC_HTTP = "generic_http"
    NOT_FOUND = "not_found"
    INVALID_FORMAT = "invalid_format"
    NO_RESPONSE = "no_response"
    VALIDATION = "validation"


class OrchError(Exception):
    """Base class for user-facing command failures."""

    kind: ErrorKind = ErrorKind.GENERIC_HTTP
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnauthenticatedError(OrchError):
    """The backend rejected the request credentials (HTTP 401)."""

    kind = ErrorKind.UNAUTHENTICATED


class ForbiddenError(OrchError):
    """The backend refused the request for the current identity (HTTP 403)."""

    kind = ErrorKind.FORBIDDEN


class GenericHTTPError(OrchError):
    """Any other non-success HTTP status."""

    kind = ErrorKind.GENERIC_HTTP

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(OrchError):
    """A resource looked up by name or id does not exist."""

    kind = ErrorKind.NOT_FOUND


class InvalidFormatError(OrchError):
    """A flag value does not follow its documented format."""

    kind = ErrorKind.INVALID_FORMAT


class NoResponseError(OrchError):
    """The HTTP call itself failed (timeout, refused connection, DNS)."""

    kind = ErrorKind.NO_RESPONSE


class ValidationError(OrchError):
    """Local validation of user input failed before any request was sent."""

    kind = ErrorKind.VALIDATION
