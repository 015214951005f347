"""Remote procedure access to the case triage backend.

Modules:
    backend: The ``TriageBackend`` protocol the copilot depends on
    client: httpx implementation of the protocol and its error type
"""

from src.common.rpc.backend import TriageBackend
from src.common.rpc.client import CaseTriageClient, RemoteCallError

__all__ = [
    "TriageBackend",
    "CaseTriageClient",
    "RemoteCallError",
]
