"""Workspace session bootstrap.

Builds an HTTP-backed ``CaseTriageCopilot`` from configuration and keeps the
backend connection open for the lifetime of the session.

Example:
    >>> config = CopilotConfig(backend_url="https://example.com/triage")
    >>> async with open_workspace("500000000000001", config) as copilot:
    ...     print(copilot.priority_band, copilot.recommended_routing)
    ...     await copilot.handle_create_task()
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.common.rpc.client import CaseTriageClient
from src.common.triage.config import CopilotConfig
from src.common.triage.notifications import HostPlatform
from src.copilot.workflows.draft import Clipboard
from src.copilot.workspace import CaseTriageCopilot

logger = logging.getLogger(__name__)


def build_client(config: CopilotConfig) -> CaseTriageClient:
    """Create a backend client from configuration.

    Args:
        config: Copilot configuration.

    Returns:
        An unopened client; enter it with ``async with`` before use.
    """
    api_key = config.api_key.get_secret_value() if config.api_key else None
    return CaseTriageClient(
        config.backend_url,
        timeout=config.request_timeout,
        api_key=api_key,
    )


@asynccontextmanager
async def open_workspace(
    case_id: str,
    config: CopilotConfig | None = None,
    host: HostPlatform | None = None,
    clipboard: Clipboard | None = None,
) -> AsyncIterator[CaseTriageCopilot]:
    """Open a workspace for a case, loaded and ready to use.

    The backend connection is closed when the context exits.

    Args:
        case_id: Case to load.
        config: Copilot configuration. Defaults to ``CopilotConfig()``.
        host: Host platform for notifications.
        clipboard: Host clipboard.

    Yields:
        The loaded workspace.
    """
    config = config or CopilotConfig()
    logger.info("Opening triage workspace for case %s at %s", case_id, config.backend_url)
    async with build_client(config) as client:
        copilot = CaseTriageCopilot(client, host=host, clipboard=clipboard, config=config)
        await copilot.load(case_id)
        yield copilot
