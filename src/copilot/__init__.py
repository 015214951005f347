"""Case triage copilot.

A decision-support workspace for a single case record: it loads the case
context, a backend priority assessment and recent triage logs, lets the
operator draft a reply with AI assistance, run predefined actions against the
case, and save an audit log of the session.

Subpackages:
    core: Data subscriptions and the session action log
    workflows: Action execution, draft generation and log persistence

Modules:
    workspace: The ``CaseTriageCopilot`` orchestrator
    presentation: Display derivations (badge classes, date formatting)
    host: Default host adapters (logging host, in-memory clipboard)
    session: Bootstrap of an HTTP-backed workspace from configuration

Example:
    >>> from src.copilot import open_workspace
    >>> async with open_workspace("500000000000001") as copilot:
    ...     await copilot.handle_escalate()
"""

from src.copilot.host import LoggingHost, MemoryClipboard
from src.copilot.session import build_client, open_workspace
from src.copilot.workspace import CaseTriageCopilot

__all__ = [
    "CaseTriageCopilot",
    "LoggingHost",
    "MemoryClipboard",
    "build_client",
    "open_workspace",
]
