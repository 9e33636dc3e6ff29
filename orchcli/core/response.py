"""HTTP response classification shared by every command handler.

``classify`` is the pure status-to-outcome mapping.  The ``check_*`` and
``process_*`` helpers wrap it for the two shapes command handlers take:

* read commands (list/get) proceed to printing on success and treat a 404
  as "nothing to show";
* mutating commands (create/set/delete) treat every non-success status as
  a failure and refine the message from the response body when possible.
"""

from __future__ import annotations

import json
import logging
from enum import StrEnum

from orchcli.core.errors import (
    ForbiddenError,
    GenericHTTPError,
    NoResponseError,
    NotFoundError,
    OrchError,
    UnauthenticatedError,
)

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = "Unauthenticated. Please login"
NO_RESPONSE_MESSAGE = "no response from backend - check api-endpoint and deployment-endpoint"
TOKEN_EXPIRED_MESSAGE = "Unauthorized. Please login: token expired"

# Gateway error returned once the access token has expired.
_DNS_FAILURE_MARKER = "504 DNS look up failed"


class StatusOutcome(StrEnum):
    """Coarse category of a single HTTP status code."""

    SUCCESS = "success"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    OTHER_CLIENT_ERROR = "other_client_error"
    SERVER_ERROR = "server_error"


def outcome_for(status: int) -> StatusOutcome:
    """Map an HTTP status code to its outcome category."""
    if 200 <= status <= 299:
        return StatusOutcome.SUCCESS
    if status in (401, 403):
        return StatusOutcome.UNAUTHENTICATED
    if status == 404:
        return StatusOutcome.NOT_FOUND
    if 400 <= status <= 499:
        return StatusOutcome.OTHER_CLIENT_ERROR
    return StatusOutcome.SERVER_ERROR


def classify(
    status: int,
    verbose: bool,
    context_message: str,
    status_text: str,
) -> tuple[bool, OrchError | None]:
    """Decide whether a command should proceed after a response.

    Returns ``(proceed, error)``.  A 404 yields ``(False, None)`` so the
    caller decides whether "not found" means an empty result.  ``verbose``
    only affects what the caller displays; it never changes the result.
    """
    if 200 <= status <= 299:
        return True, None
    if status == 401:
        return False, UnauthenticatedError(UNAUTHENTICATED_MESSAGE)
    if status == 403:
        return False, ForbiddenError(
            f"{context_message}: {status_text}. {UNAUTHENTICATED_MESSAGE}"
        )
    if status == 404:
        return False, None
    return False, GenericHTTPError(f"{context_message}:[{status_text}]", status_code=status)


# ---------------------------------------------------------------------------
# Body inspection (best effort; the backend error schema is not ours)
# ---------------------------------------------------------------------------


def body_message(body: bytes | str | None) -> str | None:
    """Return the ``message`` field of a JSON error body, if there is one."""
    if not body:
        return None
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        return None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def body_mentions(body: bytes | str | None, needle: str) -> bool:
    """Return True if the raw body contains ``needle`` (case-insensitive)."""
    if not body:
        return False
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    return needle.lower() in text.lower()


def error_from_body(body: bytes | str | None, prefix: str) -> str:
    """Build ``"<prefix>: <body message>"`` or just ``prefix``."""
    message = body_message(body)
    if message:
        return f"{prefix}: {message}"
    return prefix


def refine_error(error: OrchError, body: bytes | str | None) -> OrchError:
    """Append the body's ``message`` to a generic HTTP error."""
    if not isinstance(error, GenericHTTPError):
        return error
    message = body_message(body)
    if not message:
        return error
    return GenericHTTPError(f'{error.message}\n"{message}"', status_code=error.status_code)


# ---------------------------------------------------------------------------
# Command-handler helpers
# ---------------------------------------------------------------------------


def process_response(
    status: int,
    status_text: str,
    body: bytes | str | None,
    message: str,
    *,
    verbose: bool = False,
) -> bool:
    """Classify a read response; raise on failure, return False on 404."""
    proceed, error = classify(status, verbose, message, status_text)
    if error is not None:
        raise refine_error(error, body)
    if not proceed:
        logger.debug("%s: backend returned %d, nothing to display", message, status)
    return proceed


def check_response(
    status: int,
    status_text: str,
    body: bytes | str | None,
    message: str,
) -> None:
    """Classify a mutating response; every non-success status raises."""
    proceed, error = classify(status, False, message, status_text)
    if proceed:
        return
    if error is not None:
        raise refine_error(error, body)
    raise NotFoundError(error_from_body(body, message))


def transport_error(exc: Exception) -> OrchError:
    """Translate a failed HTTP call into a user-facing error."""
    logger.debug("request failed: %s", exc)
    if _DNS_FAILURE_MARKER in str(exc):
        return UnauthenticatedError(TOKEN_EXPIRED_MESSAGE)
    return NoResponseError(NO_RESPONSE_MESSAGE)
