"""Case triage data models.

This module defines the Pydantic models exchanged with the case triage
backend. Models accept and emit the backend's wire names (camelCase, and
PascalCase for case record fields) through aliases while Python code uses
snake_case attribute names.

Models:
    - CaseRecord: The four case fields shown in the workspace
    - EmailMessage: A recent email attached to the case
    - CaseComment: A recent comment attached to the case
    - CaseContext: Snapshot of case record, emails and comments
    - TriageAssessment: Backend-computed priority assessment
    - TriageLogEntry: A persisted triage audit record
    - DraftResult: Result of the AI draft generation procedure
    - ActionResult: Result of the take-action procedure
    - DataSnapshot: Context snapshot serialized into a triage log

Design Note:
    Every model is frozen. A fetch replaces a snapshot wholesale; nothing in
    the copilot mutates one in place.

Example:
    >>> assessment = TriageAssessment.model_validate(
    ...     {"priorityScore": 72, "priorityBand": "High"}
    ... )
    >>> assessment.priority_band
    <PriorityBand.HIGH: 'High'>
    >>> assessment.model_dump(by_alias=True)["priorityScore"]
    72.0
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal


# =============================================================================
# Enums
# =============================================================================


class PriorityBand(str, Enum):
    """Priority band label returned by the backend."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class ActionType(str, Enum):
    """Predefined actions an operator can take against a case.

    The backend accepts any action identifier; these are the ones the
    workspace offers.
    """

    CREATE_TASK = "CREATE_TASK"
    ESCALATE = "ESCALATE"
    UPDATE_STATUS = "UPDATE_STATUS"


def action_name(action: ActionType | str) -> str:
    """Return the wire identifier of an action."""
    if isinstance(action, ActionType):
        return action.value
    return str(action)


# =============================================================================
# Base Model
# =============================================================================


class WireModel(BaseModel):
    """Frozen model using camelCase wire names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# =============================================================================
# Case Context
# =============================================================================


class CaseRecord(BaseModel):
    """The case fields displayed in the workspace.

    Attributes:
        subject: Case subject line.
        status: Current case status.
        priority: Case priority picklist value.
        origin: Channel the case came in through.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    subject: str | None = None
    status: str | None = None
    priority: str | None = None
    origin: str | None = None


class EmailMessage(WireModel):
    """A recent email message on the case."""

    subject: str | None = None
    from_address: str | None = None
    text_body: str | None = None
    message_date: datetime | None = None


class CaseComment(WireModel):
    """A recent comment on the case."""

    comment_body: str | None = None
    created_by_name: str | None = None
    created_date: datetime | None = None


class CaseContext(WireModel):
    """Contextual snapshot for a single case.

    Emails and comments are ordered most recent first.

    Attributes:
        case_record: The case record fields, if the case was found.
        recent_emails: Recent emails on the case.
        recent_comments: Recent comments on the case.
    """

    case_record: CaseRecord | None = None
    recent_emails: list[EmailMessage] = Field(default_factory=list)
    recent_comments: list[CaseComment] = Field(default_factory=list)


# =============================================================================
# Triage
# =============================================================================


class TriageAssessment(WireModel):
    """Backend-computed priority assessment for a case.

    Attributes:
        priority_score: Score from 0 to 100.
        priority_band: Band label chosen by the backend. Known labels parse
            to ``PriorityBand``; any other label is kept as a plain string.
        recommended_routing: Suggested queue or team.
        reasons: Reasons behind the score.
        suggested_actions: Actions the backend recommends.
    """

    priority_score: float = Field(default=0.0, ge=0, le=100)
    priority_band: PriorityBand | str = Field(
        default=PriorityBand.LOW, union_mode="left_to_right"
    )
    recommended_routing: str | None = None
    reasons: list[str] = Field(default_factory=list)
    suggested_actions: list[str] = Field(default_factory=list)


class TriageLogEntry(WireModel):
    """A persisted triage audit record.

    Attributes:
        id: Record identifier assigned by the backend.
        timestamp: When the triage session was logged.
        triage_snapshot_json: Serialized TriageAssessment.
        draft_reply_text: Draft reply text at save time.
        ai_used: Whether a draft was present at save time.
        actions_json: Serialized session action list.
        context_snapshot_json: Serialized DataSnapshot.
        error_msg: Error recorded alongside the entry, if any.
    """

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "Id"))
    timestamp: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "Triage_Timestamp__c"),
    )
    triage_snapshot_json: str | None = None
    draft_reply_text: str | None = None
    ai_used: bool = False
    actions_json: str | None = None
    context_snapshot_json: str | None = None
    error_msg: str | None = None


# =============================================================================
# Procedure Results
# =============================================================================


class DraftResult(WireModel):
    """Result of the AI draft generation procedure."""

    success: bool = False
    draft_text: str | None = None
    error: str | None = None


class ActionResult(WireModel):
    """Result of the take-action procedure."""

    success: bool = False
    message: str | None = None


# =============================================================================
# Log Snapshot
# =============================================================================


class DataSnapshot(WireModel):
    """Context snapshot stored with a triage log entry.

    Attributes:
        subject: Case subject at capture time.
        status: Case status at capture time.
        priority: Case priority at capture time.
        origin: Case origin at capture time.
        email_count: Number of recent emails in the context.
        comment_count: Number of recent comments in the context.
        last_email_snippet: Prefix of the most recent email body.
        timestamp: Capture time.
    """

    subject: str | None = None
    status: str | None = None
    priority: str | None = None
    origin: str | None = None
    email_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    last_email_snippet: str | None = None
    timestamp: datetime

    @classmethod
    def capture(
        cls,
        context: CaseContext | None,
        timestamp: datetime,
        snippet_length: int = 200,
    ) -> DataSnapshot:
        """Build a snapshot from the current case context.

        Args:
            context: Loaded case context, or None if it never loaded.
            timestamp: Capture time.
            snippet_length: Maximum length of the email body prefix.

        Returns:
            A new DataSnapshot.
        """
        record = context.case_record if context is not None else None
        emails = context.recent_emails if context is not None else []
        comments = context.recent_comments if context is not None else []

        snippet = None
        if emails and emails[0].text_body is not None:
            snippet = emails[0].text_body[:snippet_length]

        return cls(
            subject=record.subject if record else None,
            status=record.status if record else None,
            priority=record.priority if record else None,
            origin=record.origin if record else None,
            email_count=len(emails),
            comment_count=len(comments),
            last_email_snippet=snippet,
            timestamp=timestamp,
        )
