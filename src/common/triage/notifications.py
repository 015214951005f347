"""Notification models and emitter for the triage copilot.

This module provides Pydantic models for the host-platform events the copilot
emits, plus a NotificationEmitter helper that hands them to the injected host.

Event Types:
    - Notification: A titled, severity-tagged toast shown to the operator
    - RecordChangedSignal: Advisory broadcast that a case record changed,
        consumed by external caches and listeners

Severity and Mode:
    Notifications with severity ``error`` are sticky and stay on screen until
    the operator dismisses them. Every other severity is dismissable and
    auto-dismisses.

Design Note:
    All event models include a ``message_type`` field with a fixed literal
    string value to enable easy parsing by host adapters. Notifications are
    fire-and-forget: callers never consume a return value.

Example:
    >>> from src.copilot.host import LoggingHost
    >>> emitter = NotificationEmitter(LoggingHost())
    >>> emitter.notify("Success", "Task created successfully", "success")
    >>> await emitter.record_changed("500000000000001")
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class NotificationSeverity(str, Enum):
    """Severity (toast variant) of a notification."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class NotificationMode(str, Enum):
    """Dismissal behavior of a notification."""

    DISMISSABLE = "dismissable"
    STICKY = "sticky"


def mode_for(severity: NotificationSeverity) -> NotificationMode:
    """Return the dismissal mode for a severity.

    Args:
        severity: The notification severity.

    Returns:
        ``STICKY`` for errors, ``DISMISSABLE`` otherwise.
    """
    if severity is NotificationSeverity.ERROR:
        return NotificationMode.STICKY
    return NotificationMode.DISMISSABLE


# =============================================================================
# Event Models
# =============================================================================


class Notification(BaseModel):
    """A toast notification shown to the operator.

    Attributes:
        message_type: Fixed identifier for this event type.
        title: Short heading ("Success", "Warning", "Error").
        message: Body text.
        severity: Toast variant.
        mode: Dismissal behavior, derived from severity.

    Example:
        >>> note = Notification(
        ...     title="Error",
        ...     message="Action failed",
        ...     severity=NotificationSeverity.ERROR,
        ...     mode=NotificationMode.STICKY,
        ... )
    """

    model_config = ConfigDict(frozen=True)

    message_type: Literal["notification_toast"] = "notification_toast"
    title: str = Field(..., description="Notification heading")
    message: str = Field(..., description="Notification body")
    severity: NotificationSeverity = Field(..., description="Toast variant")
    mode: NotificationMode = Field(..., description="Dismissal behavior")

    @property
    def is_sticky(self) -> bool:
        """Return whether the operator must dismiss this notification."""
        return self.mode is NotificationMode.STICKY


class RecordChangedSignal(BaseModel):
    """Advisory broadcast that one or more records changed.

    Attributes:
        message_type: Fixed identifier for this event type.
        record_ids: Identifiers of the changed records.
    """

    model_config = ConfigDict(frozen=True)

    message_type: Literal["notification_record_changed"] = (
        "notification_record_changed"
    )
    record_ids: list[str] = Field(..., min_length=1, description="Changed records")


# =============================================================================
# Host Port
# =============================================================================


class HostPlatform(Protocol):
    """Side channel into the hosting platform.

    Implementations render notifications and forward record-change
    broadcasts to whatever caches or listeners the host maintains.
    """

    def dispatch_notification(self, notification: Notification) -> None: ...

    async def notify_record_update_available(self, signal: RecordChangedSignal) -> None: ...


# =============================================================================
# Notification Emitter
# =============================================================================


class NotificationEmitter:
    """Helper for emitting host-platform events.

    Wraps a HostPlatform so workflows can emit notifications with a single
    call and never handle dispatch failures themselves.

    Attributes:
        host: The host platform receiving events.

    Example:
        >>> emitter = NotificationEmitter(host)
        >>> emitter.error("Failed to save triage log: boom")
    """

    def __init__(self, host: HostPlatform) -> None:
        """Initialize the emitter.

        Args:
            host: Host platform that renders notifications.
        """
        self.host = host

    def notify(
        self,
        title: str,
        message: str,
        severity: NotificationSeverity | str,
    ) -> None:
        """Emit a notification.

        Args:
            title: Short heading.
            message: Body text.
            severity: One of success, warning, error, info.
        """
        severity = NotificationSeverity(severity)
        notification = Notification(
            title=title,
            message=message,
            severity=severity,
            mode=mode_for(severity),
        )
        self._dispatch(notification)

    def success(self, message: str, title: str = "Success") -> None:
        """Emit a success notification."""
        self.notify(title, message, NotificationSeverity.SUCCESS)

    def warning(self, message: str, title: str = "Warning") -> None:
        """Emit a warning notification."""
        self.notify(title, message, NotificationSeverity.WARNING)

    def error(self, message: str, title: str = "Error") -> None:
        """Emit a sticky error notification."""
        self.notify(title, message, NotificationSeverity.ERROR)

    def info(self, message: str, title: str = "Info") -> None:
        """Emit an informational notification."""
        self.notify(title, message, NotificationSeverity.INFO)

    async def record_changed(self, *record_ids: str) -> None:
        """Broadcast that records changed.

        The broadcast is advisory. A host failure is logged and does not
        propagate to the caller.

        Args:
            *record_ids: Identifiers of the changed records.
        """
        signal = RecordChangedSignal(record_ids=list(record_ids))
        try:
            await self.host.notify_record_update_available(signal)
        except Exception:
            logger.warning(
                "Record change broadcast failed for %s",
                ", ".join(record_ids),
                exc_info=True,
            )

    def _dispatch(self, notification: Notification) -> None:
        """Hand a notification to the host.

        Args:
            notification: The notification to dispatch.
        """
        logger.debug(
            "Notification [%s] %s: %s",
            notification.severity.value,
            notification.title,
            notification.message,
        )
        try:
            self.host.dispatch_notification(notification)
        except Exception:
            logger.exception("Host failed to display notification: %s", notification.title)
