"""Triage log persistence workflow.

This module provides the ``LogPersistenceWorkflow``, which snapshots the
workspace into a durable triage audit record.

A saved record carries:
    - the triage assessment as JSON (``null`` if it never loaded),
    - the draft reply text and whether one was present (``aiUsed``),
    - the session action log as ``{"actions": [...]}``,
    - a ``DataSnapshot`` of the case context as JSON.

On success only the logs subscription is refreshed, since a log save does not
touch the case context or triage assessment, and the actions the save
persisted are removed from the session action log. Actions recorded while
the save was in flight stay for the next save. On failure nothing changes so the operator can retry.

Example:
    >>> workflow = LogPersistenceWorkflow(backend, subscriptions, action_log, emitter)
    >>> await workflow.save(case_id, triage, context, draft_text)
    True
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from src.common.rpc.backend import TriageBackend
from src.common.triage.errors import normalize_error
from src.common.triage.models import CaseContext, DataSnapshot, TriageAssessment
from src.common.triage.notifications import NotificationEmitter
from src.copilot.core.action_log import SessionActionLog
from src.copilot.core.subscriptions import SubscriptionManager

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class LogPersistenceWorkflow:
    """Saves triage audit records with a single-flight guard.

    Attributes:
        saving: Whether a save is currently in flight.
    """

    def __init__(
        self,
        backend: TriageBackend,
        subscriptions: SubscriptionManager,
        action_log: SessionActionLog,
        emitter: NotificationEmitter,
        snippet_length: int = 200,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the workflow.

        Args:
            backend: Backend providing ``save_triage_log``.
            subscriptions: Subscriptions whose logs slot is refreshed.
            action_log: Session log serialized and then cleared.
            emitter: Emitter for notifications.
            snippet_length: Length of the email body prefix in snapshots.
            clock: Returns the snapshot capture time.
        """
        self._backend = backend
        self._subscriptions = subscriptions
        self._action_log = action_log
        self._emitter = emitter
        self._snippet_length = snippet_length
        self._clock = clock
        self._saving = False

    @property
    def saving(self) -> bool:
        """Return whether a save is currently in flight."""
        return self._saving

    def build_snapshot(self, context: CaseContext | None) -> DataSnapshot:
        """Capture the case context for a log entry.

        Args:
            context: Loaded case context, or None.

        Returns:
            Snapshot stamped with the current time.
        """
        return DataSnapshot.capture(
            context, timestamp=self._clock(), snippet_length=self._snippet_length
        )

    async def save(
        self,
        case_id: str,
        triage: TriageAssessment | None,
        context: CaseContext | None,
        draft_text: str,
    ) -> bool:
        """Persist a triage log entry for the current session.

        Args:
            case_id: Case the entry belongs to.
            triage: Current triage assessment, or None if it never loaded.
            context: Current case context, or None if it never loaded.
            draft_text: Current draft reply text.

        Returns:
            True if the entry was saved. False on failure, or when ignored
            because a save was already in flight.
        """
        if self._saving:
            logger.warning("Ignoring save for case %s: a save is in progress", case_id)
            return False

        self._saving = True
        try:
            if triage is not None:
                triage_json = triage.model_dump_json(by_alias=True)
            else:
                triage_json = json.dumps(None)
            snapshot_json = self.build_snapshot(context).model_dump_json(by_alias=True)
            action_json = self._action_log.to_json()
            persisted = len(self._action_log)
            ai_used = bool(draft_text)

            try:
                await self._backend.save_triage_log(
                    case_id,
                    triage_json,
                    draft_text,
                    ai_used,
                    action_json,
                    snapshot_json,
                    None,
                )
            except Exception as exc:
                logger.exception("Failed to save triage log for case %s", case_id)
                self._emitter.error(
                    f"Failed to save triage log: {normalize_error(exc)}"
                )
                return False

            self._emitter.success("Triage log saved successfully")
            logger.info(
                "Saved triage log for case %s (%d actions, ai_used=%s)",
                case_id,
                persisted,
                ai_used,
            )
            await self._subscriptions.refresh_logs()
            self._action_log.discard_first(persisted)
            return True
        finally:
            self._saving = False
