"""Action execution workflow.

This module provides the ``ActionExecutor``, which runs a named action
against a case and keeps the workspace consistent afterwards.

Execution outcomes:
    - **Success** (``success=True``): the action is recorded in the session
      log, a success notification is shown (server message preferred), the
      host is told the case record changed, and all three subscriptions are
      refreshed. The in-progress flag clears only after the refresh settles.
    - **Application failure** (``success=False``): error notification with
      the server message or "Action failed". No state changes.
    - **Transport failure** (raised): error notification with the normalized
      message. No state changes.

Single-flight:
    A call made while another is in flight is ignored and returns False
    without reaching the backend. The in-progress flag is checked and set
    before the first await, so no interleaving can slip a second call in.

Example:
    >>> executor = ActionExecutor(backend, subscriptions, action_log, emitter)
    >>> await executor.execute(case_id, ActionType.ESCALATE, "Case escalated successfully")
    True
"""

from __future__ import annotations

import logging

from src.common.rpc.backend import TriageBackend
from src.common.triage.errors import normalize_error
from src.common.triage.models import ActionType, action_name
from src.common.triage.notifications import NotificationEmitter
from src.copilot.core.action_log import SessionActionLog
from src.copilot.core.subscriptions import SubscriptionManager

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGES: dict[str, str] = {
    ActionType.CREATE_TASK.value: "Task created successfully",
    ActionType.ESCALATE.value: "Case escalated successfully",
    ActionType.UPDATE_STATUS.value: "Status updated successfully",
}
"""Success messages used when the backend returns none."""


class ActionExecutor:
    """Runs case actions with a single-flight guard.

    Attributes:
        in_progress: Whether an action is currently executing.
    """

    def __init__(
        self,
        backend: TriageBackend,
        subscriptions: SubscriptionManager,
        action_log: SessionActionLog,
        emitter: NotificationEmitter,
    ) -> None:
        """Initialize the executor.

        Args:
            backend: Backend providing ``take_action``.
            subscriptions: Subscriptions refreshed after a successful action.
            action_log: Session log receiving successful actions.
            emitter: Emitter for notifications and the record-changed signal.
        """
        self._backend = backend
        self._subscriptions = subscriptions
        self._action_log = action_log
        self._emitter = emitter
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        """Return whether an action is currently executing."""
        return self._in_progress

    async def execute(
        self,
        case_id: str,
        action_type: ActionType | str,
        success_message: str | None = None,
    ) -> bool:
        """Run an action against a case.

        Args:
            case_id: Case to act on.
            action_type: Action identifier; any string the backend accepts.
            success_message: Default success text when the backend returns no
                message. Falls back to a per-action default.

        Returns:
            True if the backend reported success, False otherwise (including
            when the call was ignored because another action was in flight).
        """
        action = action_name(action_type)
        if self._in_progress:
            logger.warning(
                "Ignoring %s for case %s: another action is in progress",
                action,
                case_id,
            )
            return False

        self._in_progress = True
        try:
            try:
                result = await self._backend.take_action(case_id, action)
            except Exception as exc:
                logger.exception("Action %s failed for case %s", action, case_id)
                self._emitter.error(f"Action failed: {normalize_error(exc)}")
                return False

            if not result.success:
                logger.info(
                    "Backend rejected action %s for case %s: %s",
                    action,
                    case_id,
                    result.message,
                )
                self._emitter.error(result.message or "Action failed")
                return False

            default_message = success_message or DEFAULT_SUCCESS_MESSAGES.get(
                action, "Action completed successfully"
            )
            self._emitter.success(result.message or default_message)
            self._action_log.record(action)
            logger.info("Action %s succeeded for case %s", action, case_id)

            await self._emitter.record_changed(case_id)
            await self._subscriptions.refresh_all()
            return True
        finally:
            self._in_progress = False
