"""Shared triage types for the case triage copilot.

Modules:
    models: Pydantic models for backend records and results
    errors: Copilot exceptions and error-message normalization
    notifications: Host notification models, host port and emitter
    config: Environment-backed copilot configuration
"""

from __future__ import annotations

from src.common.triage.config import CopilotConfig
from src.common.triage.errors import (
    GENERIC_ERROR_MESSAGE,
    CaseNotBoundError,
    CopilotError,
    normalize_error,
)
from src.common.triage.models import (
    ActionResult,
    ActionType,
    CaseComment,
    CaseContext,
    CaseRecord,
    DataSnapshot,
    DraftResult,
    EmailMessage,
    PriorityBand,
    TriageAssessment,
    TriageLogEntry,
    action_name,
)
from src.common.triage.notifications import (
    HostPlatform,
    Notification,
    NotificationEmitter,
    NotificationMode,
    NotificationSeverity,
    RecordChangedSignal,
)

__all__ = [
    # Models
    "ActionResult",
    "ActionType",
    "CaseComment",
    "CaseContext",
    "CaseRecord",
    "DataSnapshot",
    "DraftResult",
    "EmailMessage",
    "PriorityBand",
    "TriageAssessment",
    "TriageLogEntry",
    "action_name",
    # Errors
    "GENERIC_ERROR_MESSAGE",
    "CopilotError",
    "CaseNotBoundError",
    "normalize_error",
    # Notifications
    "HostPlatform",
    "Notification",
    "NotificationEmitter",
    "NotificationMode",
    "NotificationSeverity",
    "RecordChangedSignal",
    # Configuration
    "CopilotConfig",
]
