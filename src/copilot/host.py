"""Default host adapters for running the copilot outside a UI shell.

``LoggingHost`` renders notifications and record-change broadcasts as log
records. ``MemoryClipboard`` keeps clipboard contents in process, and can be
told to reject direct writes so the selection fallback path is taken.
"""

from __future__ import annotations

import logging

from src.common.triage.notifications import (
    Notification,
    NotificationSeverity,
    RecordChangedSignal,
)
from src.copilot.workflows.draft import ClipboardError

logger = logging.getLogger(__name__)

_LEVELS = {
    NotificationSeverity.SUCCESS: logging.INFO,
    NotificationSeverity.INFO: logging.INFO,
    NotificationSeverity.WARNING: logging.WARNING,
    NotificationSeverity.ERROR: logging.ERROR,
}


class LoggingHost:
    """Host platform that writes every event to the log.

    Attributes:
        notifications: Notifications dispatched so far, oldest first.
        changed_records: Record ids broadcast as changed, oldest first.
    """

    def __init__(self) -> None:
        self.notifications: list[Notification] = []
        self.changed_records: list[str] = []

    def dispatch_notification(self, notification: Notification) -> None:
        self.notifications.append(notification)
        logger.log(
            _LEVELS[notification.severity],
            "%s: %s%s",
            notification.title,
            notification.message,
            " (sticky)" if notification.is_sticky else "",
        )

    async def notify_record_update_available(self, signal: RecordChangedSignal) -> None:
        self.changed_records.extend(signal.record_ids)
        logger.info("Record update available: %s", ", ".join(signal.record_ids))


class MemoryTextBuffer:
    """Off-screen text buffer owned by a ``MemoryClipboard``."""

    def __init__(self, owner: MemoryClipboard, text: str) -> None:
        self._owner = owner
        self.text = text

    def select(self) -> None:
        self._owner.selection = self


class MemoryClipboard:
    """In-process clipboard.

    Attributes:
        contents: Text currently on the clipboard, or None.
        buffers: Text buffers that have been created and not yet removed.
        selection: Buffer currently selected, or None.
        reject_writes: When set, ``write_text`` raises ``ClipboardError``.
    """

    def __init__(self, reject_writes: bool = False) -> None:
        self.contents: str | None = None
        self.buffers: list[MemoryTextBuffer] = []
        self.selection: MemoryTextBuffer | None = None
        self.reject_writes = reject_writes

    async def write_text(self, text: str) -> None:
        if self.reject_writes:
            raise ClipboardError("Clipboard write access denied")
        self.contents = text

    def create_text_buffer(self, text: str) -> MemoryTextBuffer:
        buffer = MemoryTextBuffer(self, text)
        self.buffers.append(buffer)
        return buffer

    def exec_copy(self) -> None:
        if self.selection is None:
            raise ClipboardError("Nothing selected to copy")
        self.contents = self.selection.text

    def remove_text_buffer(self, buffer: MemoryTextBuffer) -> None:
        if self.selection is buffer:
            self.selection = None
        self.buffers.remove(buffer)
