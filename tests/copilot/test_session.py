"""Tests for src.copilot.session module."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from src.common.triage.config import CopilotConfig
from src.common.triage.models import CaseContext, TriageAssessment
from src.copilot.session import build_client, open_workspace
from src.copilot.workspace import CaseTriageCopilot


class TestBuildClient:
    """Tests for build_client."""

    def test_from_config(self):
        """Test the client picks up URL, timeout and key."""
        config = CopilotConfig(
            backend_url="https://example.com/triage/",
            request_timeout=5.0,
            api_key="secret",
        )

        client = build_client(config)

        assert client.base_url == "https://example.com/triage"
        assert client._timeout == 5.0
        assert client._api_key == "secret"

    def test_without_api_key(self):
        """Test no key is set when the config has none."""
        client = build_client(CopilotConfig(api_key=None))
        assert client._api_key is None


class TestOpenWorkspace:
    """Tests for open_workspace."""

    @pytest.mark.asyncio
    async def test_opens_loaded_workspace(self):
        """Test the workspace is loaded and the connection closed on exit."""
        config = CopilotConfig(backend_url="http://backend.test/triage")

        with patch.multiple(
            "src.common.rpc.client.CaseTriageClient",
            get_case_context=AsyncMock(return_value=CaseContext()),
            get_triage_result=AsyncMock(return_value=TriageAssessment(priority_score=90)),
            get_recent_triage_logs=AsyncMock(return_value=[]),
        ):
            async with open_workspace("500A", config) as copilot:
                assert isinstance(copilot, CaseTriageCopilot)
                assert copilot.case_id == "500A"
                assert copilot.priority_score == 90
                assert copilot.config is config
                client = copilot.actions._backend
                assert client._httpx_client is not None

        assert client._httpx_client is None
