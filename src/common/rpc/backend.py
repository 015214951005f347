"""Remote procedure contract of the case triage backend.

The copilot depends only on this protocol. ``CaseTriageClient`` implements it
over HTTP; tests substitute in-memory fakes.

Procedures:
    - getCaseContext(caseId) -> CaseContext
    - getTriageResult(caseId) -> TriageAssessment
    - getRecentTriageLogs(caseId) -> list[TriageLogEntry]
    - generateAIDraft(caseId) -> DraftResult
    - takeAction(caseId, actionType) -> ActionResult
    - saveTriageLog(caseId, triageJson, draftReply, aiUsed, actionJson,
      snapshotJson, errorMsg) -> None

The three reads are idempotent. Implementations raise on transport or server
failures; application-level failures of ``generateAIDraft`` and
``takeAction`` come back as results with ``success=False``.
"""

from __future__ import annotations

from typing import Protocol

from src.common.triage.models import (
    ActionResult,
    CaseContext,
    DraftResult,
    TriageAssessment,
    TriageLogEntry,
)


class TriageBackend(Protocol):
    """Async access to the case triage backend procedures."""

    async def get_case_context(self, case_id: str) -> CaseContext: ...

    async def get_triage_result(self, case_id: str) -> TriageAssessment: ...

    async def get_recent_triage_logs(self, case_id: str) -> list[TriageLogEntry]: ...

    async def generate_ai_draft(self, case_id: str) -> DraftResult: ...

    async def take_action(self, case_id: str, action_type: str) -> ActionResult: ...

    async def save_triage_log(
        self,
        case_id: str,
        triage_json: str,
        draft_reply: str,
        ai_used: bool,
        action_json: str,
        snapshot_json: str,
        error_msg: str | None = None,
    ) -> None: ...
