"""AI draft reply workflow.

This module provides the ``DraftWorkflow``, which asks the backend for an
AI-generated reply draft and exports draft text to the clipboard.

Generation outcomes:
    - Success with non-blank text: the text is returned as the new draft and
      a success notification is shown.
    - Success with blank text: warning "AI returned empty response"; the
      current draft is kept.
    - ``success=False``: warning with the backend error or "Failed to
      generate draft".
    - Raised failure: error "Failed to generate AI draft: <message>".

Clipboard export:
    The platform clipboard is tried first. If it rejects the write, the text
    is copied through a transient off-screen text buffer: the buffer is
    created, its contents selected and copied, and the buffer removed again
    within the same call, whether or not the copy succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from src.common.rpc.backend import TriageBackend
from src.common.triage.errors import CopilotError, normalize_error
from src.common.triage.notifications import NotificationEmitter

logger = logging.getLogger(__name__)

COPY_SUCCESS_MESSAGE = "Draft copied to clipboard"
COPY_FAILURE_MESSAGE = "Failed to copy to clipboard"


# =============================================================================
# Clipboard Port
# =============================================================================


class ClipboardError(CopilotError):
    """Raised when the clipboard rejects a write or copy."""

    pass


class TextBuffer(Protocol):
    """An off-screen text buffer whose contents can be selected."""

    def select(self) -> None: ...


class Clipboard(Protocol):
    """Access to the host clipboard.

    ``write_text`` is the primary path. The remaining methods make up the
    selection-and-copy fallback for hosts that reject direct writes.
    """

    async def write_text(self, text: str) -> None: ...

    def create_text_buffer(self, text: str) -> TextBuffer: ...

    def exec_copy(self) -> None: ...

    def remove_text_buffer(self, buffer: TextBuffer) -> None: ...


@contextmanager
def transient_text_buffer(clipboard: Clipboard, text: str) -> Iterator[TextBuffer]:
    """Create an off-screen text buffer that is always removed on exit.

    Args:
        clipboard: Clipboard owning the buffer.
        text: Buffer contents.

    Yields:
        The created buffer.
    """
    buffer = clipboard.create_text_buffer(text)
    try:
        yield buffer
    finally:
        clipboard.remove_text_buffer(buffer)


# =============================================================================
# Draft Workflow
# =============================================================================


class DraftWorkflow:
    """Generates AI reply drafts and copies draft text to the clipboard.

    Attributes:
        generating: Whether a draft generation call is in flight.
    """

    def __init__(
        self,
        backend: TriageBackend,
        emitter: NotificationEmitter,
        clipboard: Clipboard,
    ) -> None:
        """Initialize the workflow.

        Args:
            backend: Backend providing ``generate_ai_draft``.
            emitter: Emitter for notifications.
            clipboard: Host clipboard.
        """
        self._backend = backend
        self._emitter = emitter
        self._clipboard = clipboard
        self._generating = False

    @property
    def generating(self) -> bool:
        """Return whether a draft generation call is in flight."""
        return self._generating

    async def generate(self, case_id: str) -> str | None:
        """Request an AI draft for a case.

        Args:
            case_id: Case to draft a reply for.

        Returns:
            The new draft text, or None when the current draft should be
            kept (blank result or failure).
        """
        self._generating = True
        try:
            result = await self._backend.generate_ai_draft(case_id)
            logger.debug("AI draft result for case %s: %r", case_id, result)

            if not result.success:
                self._emitter.warning(result.error or "Failed to generate draft")
                return None
            if not result.draft_text or not result.draft_text.strip():
                self._emitter.warning("AI returned empty response")
                return None

            self._emitter.success("AI draft generated successfully")
            return result.draft_text
        except Exception as exc:
            logger.exception("AI draft generation failed for case %s", case_id)
            self._emitter.error(
                f"Failed to generate AI draft: {normalize_error(exc)}"
            )
            return None
        finally:
            self._generating = False

    async def copy(self, text: str) -> bool:
        """Copy draft text to the clipboard.

        Args:
            text: Draft text to copy.

        Returns:
            True if the text reached the clipboard by either path.
        """
        if not text:
            self._emitter.warning("No draft text to copy")
            return False

        try:
            await self._clipboard.write_text(text)
        except Exception as exc:
            logger.info("Clipboard write rejected (%s); using fallback copy", exc)
            return self._fallback_copy(text)

        self._emitter.success(COPY_SUCCESS_MESSAGE)
        return True

    def _fallback_copy(self, text: str) -> bool:
        """Copy text through a transient selection buffer.

        Args:
            text: Text to copy.

        Returns:
            True if the copy succeeded.
        """
        try:
            with transient_text_buffer(self._clipboard, text) as buffer:
                buffer.select()
                self._clipboard.exec_copy()
        except Exception:
            logger.warning("Fallback clipboard copy failed", exc_info=True)
            self._emitter.error(COPY_FAILURE_MESSAGE)
            return False

        self._emitter.success(COPY_SUCCESS_MESSAGE)
        return True
