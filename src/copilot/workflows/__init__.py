"""User-triggered workflows of the triage workspace.

Modules:
    actions: Single-flight execution of case actions
    draft: AI draft generation and clipboard export
    log_persistence: Saving triage audit records
"""

from src.copilot.workflows.actions import DEFAULT_SUCCESS_MESSAGES, ActionExecutor
from src.copilot.workflows.draft import (
    Clipboard,
    ClipboardError,
    DraftWorkflow,
    TextBuffer,
    transient_text_buffer,
)
from src.copilot.workflows.log_persistence import LogPersistenceWorkflow

__all__ = [
    # Actions
    "ActionExecutor",
    "DEFAULT_SUCCESS_MESSAGES",
    # Draft
    "DraftWorkflow",
    "Clipboard",
    "ClipboardError",
    "TextBuffer",
    "transient_text_buffer",
    # Log persistence
    "LogPersistenceWorkflow",
]
