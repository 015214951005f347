"""Error types and error-message normalization for the triage copilot.

Failures reach the copilot in many shapes: plain strings, transport
exceptions, backend error payloads with a nested ``body.message``, or a
``body`` list of field errors. This module reduces all of them to a single
human-readable string suitable for a notification.

Classes:
    CopilotError: Base exception for copilot misuse.
    CaseNotBoundError: Raised when a workflow runs before a case is loaded.

Functions:
    normalize_error: Convert any failure payload into a display string.

Example:
    >>> normalize_error({"body": [{"message": "a"}, {"message": "b"}]})
    'a, b'
    >>> normalize_error(None)
    'An unexpected error occurred'
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"
"""Fallback text used when no message can be extracted from a failure."""


# =============================================================================
# Exceptions
# =============================================================================


class CopilotError(Exception):
    """Base exception for triage copilot errors."""

    pass


class CaseNotBoundError(CopilotError):
    """Raised when an operation needs a case id but none has been loaded."""

    pass


# =============================================================================
# Normalization
# =============================================================================


def _field(source: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an object attribute."""
    if source is None:
        return None
    if isinstance(source, dict):
        return source.get(name)
    return getattr(source, name, None)


def _message_of(source: Any) -> str | None:
    """Return a non-empty string ``message`` field of ``source``, if any."""
    message = _field(source, "message")
    if isinstance(message, str) and message:
        return message
    return None


def _extract(error: Any) -> str:
    if isinstance(error, str):
        return error

    body = _field(error, "body")
    if not isinstance(body, list):
        body_message = _message_of(body)
        if body_message:
            return body_message

    message = _message_of(error)
    if message:
        return message

    if isinstance(body, list):
        parts = [_message_of(item) for item in body]
        joined = ", ".join(part for part in parts if part)
        if joined:
            return joined

    # Exceptions carry their text in args rather than a message field.
    if isinstance(error, BaseException) and str(error):
        return str(error)

    return GENERIC_ERROR_MESSAGE


def normalize_error(error: Any) -> str:
    """Convert a heterogeneous failure payload into a display string.

    Resolution order:
        1. A plain string is returned as-is.
        2. ``body.message`` (structured backend error).
        3. ``message`` (generic error).
        4. ``body`` as a list of sub-errors, messages joined with ``", "``.
        5. ``str(exc)`` for Python exceptions.
        6. ``GENERIC_ERROR_MESSAGE``.

    Both dictionaries and objects are accepted. This function never raises.

    Args:
        error: Any failure value (string, dict, exception, ``None``).

    Returns:
        A human-readable error message.
    """
    try:
        return _extract(error)
    except Exception:
        logger.debug("Could not extract message from %r", error, exc_info=True)
        return GENERIC_ERROR_MESSAGE
