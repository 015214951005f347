"""Tests for src.copilot.workspace module.

Tests cover:
- View state before and after loading a case
- Context error surfacing and clearing
- Draft, copy, save and action handlers
- Cross-workflow disabling (actions while saving, save while generating)
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.common.rpc.client import RemoteCallError
from src.common.triage.config import CopilotConfig
from src.common.triage.errors import CaseNotBoundError
from src.common.triage.models import (
    ActionResult,
    CaseContext,
    DraftResult,
    TriageAssessment,
    TriageLogEntry,
)
from src.common.triage.notifications import NotificationSeverity
from src.copilot.host import LoggingHost, MemoryClipboard
from src.copilot.workspace import CaseTriageCopilot


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def context() -> CaseContext:
    return CaseContext.model_validate(
        {
            "caseRecord": {"Subject": "Printer on fire", "Status": "New"},
            "recentEmails": [
                {"subject": "Help", "messageDate": "2026-01-05T09:30:00Z"},
                {"subject": "Older"},
            ],
            "recentComments": [
                {"commentBody": "Called customer", "createdDate": "2026-01-04T16:00:00Z"}
            ],
        }
    )


@pytest.fixture
def triage() -> TriageAssessment:
    return TriageAssessment(
        priority_score=75,
        priority_band="Critical",
        recommended_routing="L2 Support",
        reasons=["VIP customer", "Outage keyword"],
        suggested_actions=["ESCALATE"],
    )


@pytest.fixture
def backend(context, triage) -> MagicMock:
    """Create a mock backend where every procedure succeeds."""
    backend = MagicMock()
    backend.get_case_context = AsyncMock(return_value=context)
    backend.get_triage_result = AsyncMock(return_value=triage)
    backend.get_recent_triage_logs = AsyncMock(
        return_value=[TriageLogEntry(id="a01", timestamp="2026-01-03T08:15:00Z")]
    )
    backend.generate_ai_draft = AsyncMock(
        return_value=DraftResult(success=True, draft_text="Dear customer, ...")
    )
    backend.take_action = AsyncMock(return_value=ActionResult(success=True))
    backend.save_triage_log = AsyncMock(return_value=None)
    return backend


@pytest.fixture
def host() -> LoggingHost:
    return LoggingHost()


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def config() -> CopilotConfig:
    return CopilotConfig(default_routing="L1 Support", snippet_length=200)


@pytest.fixture
def copilot(backend, host, clipboard, config) -> CaseTriageCopilot:
    return CaseTriageCopilot(backend, host=host, clipboard=clipboard, config=config)


def last_note(host: LoggingHost):
    return host.notifications[-1]


# =============================================================================
# View State
# =============================================================================


class TestViewStateBeforeLoad:
    """Tests for defaults before any data arrives."""

    def test_defaults(self, copilot):
        """Test view defaults with nothing loaded."""
        assert copilot.case_id is None
        assert copilot.priority_score == 0
        assert copilot.priority_band == "Low"
        assert copilot.recommended_routing == "L1 Support"
        assert copilot.triage_reasons == []
        assert copilot.has_reasons is False
        assert copilot.has_suggested_actions is False
        assert copilot.recent_emails == []
        assert copilot.has_emails is False
        assert copilot.has_comments is False
        assert copilot.has_logs is False
        assert copilot.has_error is False
        assert copilot.score_badge_class == "score-badge score-low"
        assert copilot.band_badge_class == "slds-badge_inverse badge-low"

    def test_copy_disabled_without_draft(self, copilot):
        """Test copy is disabled with an empty draft."""
        assert copilot.is_copy_disabled is True

        copilot.handle_draft_change("Hello")

        assert copilot.is_copy_disabled is False
        assert copilot.draft_text == "Hello"


class TestViewStateAfterLoad:
    """Tests for view state derived from loaded data."""

    @pytest.mark.asyncio
    async def test_triage_view(self, copilot):
        """Test triage-derived properties."""
        await copilot.load("500A")

        assert copilot.case_id == "500A"
        assert copilot.is_loading is False
        assert copilot.priority_score == 75
        assert copilot.priority_band == "Critical"
        assert copilot.recommended_routing == "L2 Support"
        assert copilot.triage_reasons == ["VIP customer", "Outage keyword"]
        assert copilot.suggested_actions == ["ESCALATE"]
        assert copilot.has_reasons is True

    @pytest.mark.asyncio
    async def test_badges_are_independent(self, copilot):
        """Test the score tier and band badge can disagree."""
        await copilot.load("500A")

        assert copilot.score_badge_class == "score-badge score-high"
        assert copilot.band_badge_class == "slds-badge_inverse badge-critical"

    @pytest.mark.asyncio
    async def test_rows_carry_formatted_dates(self, copilot):
        """Test email, comment and log rows."""
        await copilot.load("500A")

        emails = copilot.recent_emails
        assert [row.record.subject for row in emails] == ["Help", "Older"]
        assert emails[0].formatted_date == "Jan 5, 2026, 09:30 AM"
        assert emails[1].formatted_date == ""
        assert copilot.recent_comments[0].formatted_date == "Jan 4, 2026, 04:00 PM"
        assert copilot.recent_logs[0].formatted_date == "Jan 3, 2026, 08:15 AM"
        assert copilot.has_emails and copilot.has_comments and copilot.has_logs

    @pytest.mark.asyncio
    async def test_routing_falls_back_to_config(self, copilot, backend):
        """Test the configured routing is used when none is recommended."""
        backend.get_triage_result.return_value = TriageAssessment(priority_score=10)

        await copilot.load("500A")

        assert copilot.recommended_routing == "L1 Support"

    @pytest.mark.asyncio
    async def test_unknown_band_still_displays(self, copilot, backend, host):
        """Test an unrecognized band label keeps the triage view usable."""
        backend.get_triage_result.return_value = TriageAssessment.model_validate(
            {"priorityScore": 45, "priorityBand": "Urgent", "reasons": ["New SLA"]}
        )

        await copilot.load("500A")

        assert copilot.priority_band == "Urgent"
        assert copilot.band_badge_class == "slds-badge_inverse badge-low"
        assert copilot.priority_score == 45
        assert copilot.triage_reasons == ["New SLA"]
        assert host.notifications == []


class TestContextError:
    """Tests for the context error message."""

    @pytest.mark.asyncio
    async def test_error_set_and_cleared(self, copilot, backend, context, host):
        """Test a context failure shows until the next successful load."""
        backend.get_case_context.side_effect = [
            RemoteCallError("x", body={"message": "Insufficient access"}),
            context,
        ]

        await copilot.load("500A")

        assert copilot.has_error is True
        assert copilot.error_message == "Insufficient access"
        assert last_note(host).severity is NotificationSeverity.ERROR
        assert copilot.priority_score == 75

        await copilot.subscriptions.refresh_all()

        assert copilot.has_error is False
        assert copilot.error_message is None


# =============================================================================
# Handlers
# =============================================================================


class TestHandlersRequireCase:
    """Tests for handlers invoked before a case is loaded."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "handler",
        ["handle_generate_draft", "handle_save_log", "handle_escalate"],
    )
    async def test_raises(self, copilot, handler):
        """Test case-bound handlers raise without a case."""
        with pytest.raises(CaseNotBoundError):
            await getattr(copilot, handler)()


class TestDraftHandlers:
    """Tests for draft generation and copy handlers."""

    @pytest.mark.asyncio
    async def test_generate_replaces_draft(self, copilot):
        """Test a generated draft becomes the current draft."""
        await copilot.load("500A")
        copilot.handle_draft_change("my notes")

        assert await copilot.handle_generate_draft() is True
        assert copilot.draft_text == "Dear customer, ..."

    @pytest.mark.asyncio
    async def test_blank_draft_keeps_current(self, copilot, backend, host):
        """Test a blank draft leaves the current text in place."""
        backend.generate_ai_draft.return_value = DraftResult(success=True, draft_text="  ")
        await copilot.load("500A")
        copilot.handle_draft_change("my notes")

        assert await copilot.handle_generate_draft() is False
        assert copilot.draft_text == "my notes"
        assert last_note(host).message == "AI returned empty response"
        assert last_note(host).severity is NotificationSeverity.WARNING

    @pytest.mark.asyncio
    async def test_copy(self, copilot, clipboard):
        """Test the current draft is copied."""
        copilot.handle_draft_change("Dear customer")

        assert await copilot.handle_copy_draft() is True
        assert clipboard.contents == "Dear customer"

    @pytest.mark.asyncio
    async def test_copy_empty_warns(self, copilot, host):
        """Test copying an empty draft warns."""
        assert await copilot.handle_copy_draft() is False
        assert last_note(host).message == "No draft text to copy"

    @pytest.mark.asyncio
    async def test_switching_case_discards_draft(self, copilot):
        """Test loading another case starts with an empty draft."""
        await copilot.load("500A")
        copilot.handle_draft_change("for 500A")

        await copilot.load("500B")

        assert copilot.draft_text == ""

    @pytest.mark.asyncio
    async def test_draft_for_previous_case_is_dropped(self, copilot, backend):
        """Test a draft arriving after a case switch does not land in the new case."""
        release = asyncio.Event()

        async def slow_draft(case_id):
            await release.wait()
            return DraftResult(success=True, draft_text=f"Reply for case {case_id}")

        backend.generate_ai_draft.side_effect = slow_draft
        await copilot.load("500A")

        generate = asyncio.create_task(copilot.handle_generate_draft())
        await asyncio.sleep(0)
        await copilot.load("500B")

        release.set()
        assert await generate is False
        assert copilot.case_id == "500B"
        assert copilot.draft_text == ""


class TestActionHandlers:
    """Tests for the action handlers."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("handler", "action", "message"),
        [
            ("handle_create_task", "CREATE_TASK", "Task created successfully"),
            ("handle_escalate", "ESCALATE", "Case escalated successfully"),
            ("handle_update_status", "UPDATE_STATUS", "Status updated successfully"),
        ],
    )
    async def test_action(self, copilot, backend, host, handler, action, message):
        """Test each handler runs its action and refreshes once."""
        await copilot.load("500A")

        assert await getattr(copilot, handler)() is True

        backend.take_action.assert_awaited_once_with("500A", action)
        assert copilot.action_log.actions == (action,)
        assert backend.get_case_context.await_count == 2
        assert last_note(host).message == message
        assert host.changed_records == ["500A"]

    @pytest.mark.asyncio
    async def test_actions_disabled_while_saving(self, copilot, backend):
        """Test actions are refused while a save is in flight."""
        release = asyncio.Event()

        async def slow_save(*args):
            await release.wait()

        backend.save_triage_log.side_effect = slow_save
        await copilot.load("500A")

        save = asyncio.create_task(copilot.handle_save_log())
        await asyncio.sleep(0)
        assert copilot.is_action_disabled is True

        assert await copilot.handle_escalate() is False
        backend.take_action.assert_not_awaited()

        release.set()
        assert await save is True
        assert copilot.is_action_disabled is False


class TestSaveHandler:
    """Tests for the save handler."""

    @pytest.mark.asyncio
    async def test_save_after_action(self, copilot, backend):
        """Test the saved entry carries the session's actions and draft."""
        await copilot.load("500A")
        await copilot.handle_escalate()
        copilot.handle_draft_change("Dear customer")

        assert await copilot.handle_save_log() is True

        args = backend.save_triage_log.call_args.args
        assert json.loads(args[4]) == {"actions": ["ESCALATE"]}
        assert args[2] == "Dear customer"
        assert args[3] is True
        assert copilot.action_log.is_empty
        assert copilot.draft_text == "Dear customer"

    @pytest.mark.asyncio
    async def test_action_finishing_during_save_is_kept(self, copilot, backend):
        """Test an action that completes mid-save stays for the next save."""
        action_release = asyncio.Event()
        save_release = asyncio.Event()

        async def slow_action(case_id, action_type):
            await action_release.wait()
            return ActionResult(success=True)

        async def slow_save(*args):
            await save_release.wait()

        backend.take_action.side_effect = slow_action
        backend.save_triage_log.side_effect = slow_save
        await copilot.load("500A")

        escalate = asyncio.create_task(copilot.handle_escalate())
        await asyncio.sleep(0)
        save = asyncio.create_task(copilot.handle_save_log())
        await asyncio.sleep(0)

        action_release.set()
        assert await escalate is True
        assert copilot.action_log.actions == ("ESCALATE",)

        save_release.set()
        assert await save is True

        first_save = backend.save_triage_log.call_args_list[0].args
        assert json.loads(first_save[4]) == {"actions": []}
        assert copilot.action_log.actions == ("ESCALATE",)

        backend.save_triage_log.side_effect = None
        assert await copilot.handle_save_log() is True

        second_save = backend.save_triage_log.call_args_list[1].args
        assert json.loads(second_save[4]) == {"actions": ["ESCALATE"]}
        assert copilot.action_log.is_empty

    @pytest.mark.asyncio
    async def test_save_disabled_while_generating(self, copilot, backend):
        """Test saving is refused while a draft is being generated."""
        release = asyncio.Event()

        async def slow_draft(case_id):
            await release.wait()
            return DraftResult(success=True, draft_text="Dear customer")

        backend.generate_ai_draft.side_effect = slow_draft
        await copilot.load("500A")

        generate = asyncio.create_task(copilot.handle_generate_draft())
        await asyncio.sleep(0)
        assert copilot.is_save_disabled is True
        assert copilot.is_copy_disabled is True

        assert await copilot.handle_save_log() is False
        backend.save_triage_log.assert_not_awaited()

        release.set()
        assert await generate is True
        assert copilot.is_save_disabled is False
