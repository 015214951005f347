"""Tests for src.copilot.workflows.draft module."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.common.rpc.client import RemoteCallError
from src.common.triage.models import DraftResult
from src.copilot.host import MemoryClipboard
from src.copilot.workflows.draft import (
    COPY_FAILURE_MESSAGE,
    COPY_SUCCESS_MESSAGE,
    ClipboardError,
    DraftWorkflow,
    transient_text_buffer,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def backend() -> MagicMock:
    """Create a mock backend returning a draft."""
    backend = MagicMock()
    backend.generate_ai_draft = AsyncMock(
        return_value=DraftResult(success=True, draft_text="Dear customer, ...")
    )
    return backend


@pytest.fixture
def emitter() -> MagicMock:
    return MagicMock()


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def workflow(backend, emitter, clipboard) -> DraftWorkflow:
    return DraftWorkflow(backend, emitter, clipboard)


# =============================================================================
# Generation
# =============================================================================


class TestGenerate:
    """Tests for DraftWorkflow.generate."""

    @pytest.mark.asyncio
    async def test_success(self, workflow, backend, emitter):
        """Test a non-blank draft is returned."""
        draft = await workflow.generate("500A")

        assert draft == "Dear customer, ..."
        backend.generate_ai_draft.assert_awaited_once_with("500A")
        emitter.success.assert_called_once_with("AI draft generated successfully")
        assert workflow.generating is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   \n\t"])
    async def test_blank_draft_warns(self, workflow, backend, emitter, text):
        """Test a blank draft warns and keeps the current draft."""
        backend.generate_ai_draft.return_value = DraftResult(success=True, draft_text=text)

        draft = await workflow.generate("500A")

        assert draft is None
        emitter.warning.assert_called_once_with("AI returned empty response")
        emitter.success.assert_not_called()

    @pytest.mark.asyncio
    async def test_application_failure(self, workflow, backend, emitter):
        """Test success=False warns with the backend error."""
        backend.generate_ai_draft.return_value = DraftResult(
            success=False, error="Model quota exceeded"
        )

        assert await workflow.generate("500A") is None
        emitter.warning.assert_called_once_with("Model quota exceeded")

    @pytest.mark.asyncio
    async def test_application_failure_default_message(self, workflow, backend, emitter):
        """Test success=False without an error uses the default."""
        backend.generate_ai_draft.return_value = DraftResult(success=False)

        await workflow.generate("500A")

        emitter.warning.assert_called_once_with("Failed to generate draft")

    @pytest.mark.asyncio
    async def test_transport_failure(self, workflow, backend, emitter):
        """Test a raised failure shows a normalized error."""
        backend.generate_ai_draft.side_effect = RemoteCallError(
            "generateAIDraft failed (HTTP 503)", body={"message": "AI service down"}
        )

        assert await workflow.generate("500A") is None
        emitter.error.assert_called_once_with(
            "Failed to generate AI draft: AI service down"
        )
        assert workflow.generating is False

    @pytest.mark.asyncio
    async def test_generating_flag_during_call(self, workflow, backend):
        """Test the generating flag is set while the call is in flight."""
        seen: list[bool] = []

        async def generate(case_id):
            seen.append(workflow.generating)
            return DraftResult(success=True, draft_text="ok")

        backend.generate_ai_draft.side_effect = generate

        await workflow.generate("500A")

        assert seen == [True]
        assert workflow.generating is False


# =============================================================================
# Clipboard
# =============================================================================


class TestCopy:
    """Tests for DraftWorkflow.copy."""

    @pytest.mark.asyncio
    async def test_empty_text_warns(self, workflow, clipboard, emitter):
        """Test copying nothing warns and leaves the clipboard alone."""
        assert await workflow.copy("") is False

        emitter.warning.assert_called_once_with("No draft text to copy")
        assert clipboard.contents is None

    @pytest.mark.asyncio
    async def test_primary_path(self, workflow, clipboard, emitter):
        """Test a direct clipboard write."""
        assert await workflow.copy("Dear customer") is True

        assert clipboard.contents == "Dear customer"
        assert clipboard.buffers == []
        emitter.success.assert_called_once_with(COPY_SUCCESS_MESSAGE)

    @pytest.mark.asyncio
    async def test_fallback_path(self, workflow, clipboard, emitter):
        """Test the selection fallback copies and removes its buffer."""
        clipboard.reject_writes = True

        assert await workflow.copy("Dear customer") is True

        assert clipboard.contents == "Dear customer"
        assert clipboard.buffers == []
        assert clipboard.selection is None
        emitter.success.assert_called_once_with(COPY_SUCCESS_MESSAGE)

    @pytest.mark.asyncio
    async def test_fallback_failure_removes_buffer(self, workflow, emitter):
        """Test the buffer is removed even when the copy command fails."""
        clipboard = MagicMock()
        clipboard.write_text = AsyncMock(side_effect=ClipboardError("denied"))
        clipboard.exec_copy.side_effect = ClipboardError("copy command failed")
        workflow = DraftWorkflow(MagicMock(), emitter, clipboard)

        assert await workflow.copy("Dear customer") is False

        buffer = clipboard.create_text_buffer.return_value
        buffer.select.assert_called_once()
        clipboard.remove_text_buffer.assert_called_once_with(buffer)
        emitter.error.assert_called_once_with(COPY_FAILURE_MESSAGE)
        emitter.success.assert_not_called()


class TestTransientTextBuffer:
    """Tests for transient_text_buffer."""

    def test_removed_on_error(self, clipboard):
        """Test the buffer is removed when the body raises."""
        with pytest.raises(RuntimeError):
            with transient_text_buffer(clipboard, "text") as buffer:
                assert clipboard.buffers == [buffer]
                raise RuntimeError("boom")

        assert clipboard.buffers == []
