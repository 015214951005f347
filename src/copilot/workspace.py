"""CaseTriageCopilot: orchestrator for a single case triage workspace.

This module provides the ``CaseTriageCopilot`` class, which wires the data
subscriptions, the user workflows and the notification channel together and
exposes the derived view state of the workspace.

Ownership:
    - The copilot owns the draft text and the session action log.
    - Each workflow owns its own in-flight flag; the copilot aggregates the
      flags into the ``is_*_disabled`` view properties.
    - The subscription manager owns the loaded data. The context error shown
      in the workspace is the context slot's error, so it clears on the next
      successful context load.

Lifecycle:
    1. Construct with a backend and, optionally, host adapters and config.
    2. ``await load(case_id)`` binds the subscriptions and loads all three.
    3. Handlers drive the workflows. A handler whose disabled flag is set
       returns without starting anything.

Classes:
    CaseTriageCopilot: Workspace orchestrator.

Example:
    >>> copilot = CaseTriageCopilot(backend)
    >>> await copilot.load("500000000000001")
    >>> copilot.score_badge_class
    'score-badge score-critical'
    >>> await copilot.handle_escalate()
    True
"""

from __future__ import annotations

import logging

from src.common.rpc.backend import TriageBackend
from src.common.triage.config import CopilotConfig
from src.common.triage.errors import CaseNotBoundError
from src.common.triage.models import (
    ActionType,
    CaseComment,
    CaseContext,
    EmailMessage,
    PriorityBand,
    TriageAssessment,
    TriageLogEntry,
)
from src.common.triage.notifications import HostPlatform, NotificationEmitter
from src.copilot import presentation
from src.copilot.core.action_log import SessionActionLog
from src.copilot.core.subscriptions import SubscriptionManager
from src.copilot.host import LoggingHost, MemoryClipboard
from src.copilot.presentation import DatedRow
from src.copilot.workflows.actions import DEFAULT_SUCCESS_MESSAGES, ActionExecutor
from src.copilot.workflows.draft import Clipboard, DraftWorkflow
from src.copilot.workflows.log_persistence import LogPersistenceWorkflow

logger = logging.getLogger(__name__)


class CaseTriageCopilot:
    """Decision-support workspace for one case record.

    Attributes:
        config: Copilot configuration.
        emitter: Notification channel to the host.
        action_log: Actions taken during this session.
        subscriptions: Context, triage and logs data slots.
        actions: Action execution workflow.
        drafts: Draft generation and clipboard workflow.
        log_persistence: Triage log save workflow.
        draft_text: Current reply draft, edited by the operator or generated.
    """

    def __init__(
        self,
        backend: TriageBackend,
        host: HostPlatform | None = None,
        clipboard: Clipboard | None = None,
        config: CopilotConfig | None = None,
    ) -> None:
        """Initialize the workspace.

        Args:
            backend: Remote triage procedures.
            host: Host platform for notifications. Defaults to ``LoggingHost``.
            clipboard: Host clipboard. Defaults to ``MemoryClipboard``.
            config: Copilot configuration. Defaults to ``CopilotConfig()``.
        """
        self.config = config or CopilotConfig()
        self.emitter = NotificationEmitter(host or LoggingHost())
        self.action_log = SessionActionLog()
        self.subscriptions = SubscriptionManager(backend, self.emitter)
        self.actions = ActionExecutor(
            backend, self.subscriptions, self.action_log, self.emitter
        )
        self.drafts = DraftWorkflow(
            backend, self.emitter, clipboard or MemoryClipboard()
        )
        self.log_persistence = LogPersistenceWorkflow(
            backend,
            self.subscriptions,
            self.action_log,
            self.emitter,
            snippet_length=self.config.snippet_length,
        )
        self.draft_text = ""

    def __repr__(self) -> str:
        return (
            f"CaseTriageCopilot(case_id={self.case_id!r}, "
            f"loading={self.is_loading}, actions={len(self.action_log)})"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def case_id(self) -> str | None:
        """Return the case the workspace is bound to."""
        return self.subscriptions.case_id

    async def load(self, case_id: str) -> None:
        """Bind the workspace to a case and load its data.

        Switching to a different case discards the draft of the previous one.

        Args:
            case_id: Case to load.
        """
        if self.case_id is not None and case_id != self.case_id:
            logger.info("Switching workspace from case %s to %s", self.case_id, case_id)
            self.draft_text = ""
        await self.subscriptions.bind(case_id)

    def _require_case(self) -> str:
        if self.case_id is None:
            raise CaseNotBoundError("No case is loaded in the workspace")
        return self.case_id

    # ------------------------------------------------------------------
    # Loaded data
    # ------------------------------------------------------------------

    @property
    def context(self) -> CaseContext | None:
        """Return the loaded case context, or None."""
        return self.subscriptions.context.data

    @property
    def triage(self) -> TriageAssessment | None:
        """Return the loaded triage assessment, or None."""
        return self.subscriptions.triage.data

    @property
    def is_loading(self) -> bool:
        """Return whether the context or triage is still loading."""
        return self.subscriptions.is_loading

    @property
    def error_message(self) -> str | None:
        """Return the last case context failure, if it has not been cleared."""
        return self.subscriptions.context.error

    @property
    def has_error(self) -> bool:
        """Return whether a case context failure is shown."""
        return bool(self.error_message)

    # ------------------------------------------------------------------
    # Triage view
    # ------------------------------------------------------------------

    @property
    def priority_score(self) -> float:
        return self.triage.priority_score if self.triage else 0

    @property
    def priority_band(self) -> str:
        if self.triage is None:
            return PriorityBand.LOW.value
        band = self.triage.priority_band
        return band.value if isinstance(band, PriorityBand) else band

    @property
    def recommended_routing(self) -> str:
        if self.triage and self.triage.recommended_routing:
            return self.triage.recommended_routing
        return self.config.default_routing

    @property
    def triage_reasons(self) -> list[str]:
        return list(self.triage.reasons) if self.triage else []

    @property
    def has_reasons(self) -> bool:
        return bool(self.triage_reasons)

    @property
    def suggested_actions(self) -> list[str]:
        return list(self.triage.suggested_actions) if self.triage else []

    @property
    def has_suggested_actions(self) -> bool:
        return bool(self.suggested_actions)

    @property
    def score_badge_class(self) -> str:
        return presentation.score_badge_class(self.priority_score)

    @property
    def band_badge_class(self) -> str:
        return presentation.band_badge_class(self.priority_band)

    # ------------------------------------------------------------------
    # Context and history view
    # ------------------------------------------------------------------

    @property
    def recent_emails(self) -> list[DatedRow[EmailMessage]]:
        if self.context is None:
            return []
        return [
            DatedRow(email, presentation.format_datetime(email.message_date))
            for email in self.context.recent_emails
        ]

    @property
    def has_emails(self) -> bool:
        return bool(self.recent_emails)

    @property
    def recent_comments(self) -> list[DatedRow[CaseComment]]:
        if self.context is None:
            return []
        return [
            DatedRow(comment, presentation.format_datetime(comment.created_date))
            for comment in self.context.recent_comments
        ]

    @property
    def has_comments(self) -> bool:
        return bool(self.recent_comments)

    @property
    def recent_logs(self) -> list[DatedRow[TriageLogEntry]]:
        entries = self.subscriptions.logs.data or []
        return [
            DatedRow(entry, presentation.format_datetime(entry.timestamp))
            for entry in entries
        ]

    @property
    def has_logs(self) -> bool:
        return bool(self.recent_logs)

    # ------------------------------------------------------------------
    # Workflow state
    # ------------------------------------------------------------------

    @property
    def is_generating(self) -> bool:
        return self.drafts.generating

    @property
    def is_saving(self) -> bool:
        return self.log_persistence.saving

    @property
    def is_action_in_progress(self) -> bool:
        return self.actions.in_progress

    @property
    def is_copy_disabled(self) -> bool:
        return not self.draft_text or self.is_generating

    @property
    def is_save_disabled(self) -> bool:
        return self.is_saving or self.is_generating

    @property
    def is_action_disabled(self) -> bool:
        return self.is_action_in_progress or self.is_saving

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def handle_draft_change(self, text: str) -> None:
        """Replace the draft with operator-edited text."""
        self.draft_text = text

    async def handle_generate_draft(self) -> bool:
        """Generate an AI draft and make it the current draft.

        A draft that arrives after the workspace moved to another case is
        dropped.

        Returns:
            True if the draft was replaced.
        """
        case_id = self._require_case()
        if self.is_generating:
            logger.debug("Ignoring draft request: generation already in progress")
            return False
        draft = await self.drafts.generate(case_id)
        if draft is None:
            return False
        if case_id != self.case_id:
            logger.debug(
                "Dropping draft for case %s: workspace moved to %s", case_id, self.case_id
            )
            return False
        self.draft_text = draft
        return True

    async def handle_copy_draft(self) -> bool:
        """Copy the current draft to the clipboard.

        An empty draft is reported to the operator with a warning rather than
        ignored.

        Returns:
            True if the draft reached the clipboard.
        """
        if self.is_generating:
            logger.debug("Ignoring copy request: generation in progress")
            return False
        return await self.drafts.copy(self.draft_text)

    async def handle_save_log(self) -> bool:
        """Save a triage log entry for the session.

        Returns:
            True if the entry was saved.
        """
        case_id = self._require_case()
        if self.is_save_disabled:
            logger.debug("Ignoring save request: save disabled")
            return False
        return await self.log_persistence.save(
            case_id, self.triage, self.context, self.draft_text
        )

    async def handle_create_task(self) -> bool:
        return await self._run_action(ActionType.CREATE_TASK)

    async def handle_escalate(self) -> bool:
        return await self._run_action(ActionType.ESCALATE)

    async def handle_update_status(self) -> bool:
        return await self._run_action(ActionType.UPDATE_STATUS)

    async def _run_action(self, action_type: ActionType) -> bool:
        case_id = self._require_case()
        if self.is_action_disabled:
            logger.debug("Ignoring %s: actions disabled", action_type.value)
            return False
        return await self.actions.execute(
            case_id, action_type, DEFAULT_SUCCESS_MESSAGES[action_type.value]
        )
