"""Core state holders for the triage workspace.

Modules:
    subscriptions: Remote-backed data slots for context, triage and logs
    action_log: Ephemeral record of actions taken during the session
"""

from src.copilot.core.action_log import SessionActionLog
from src.copilot.core.subscriptions import Subscription, SubscriptionManager

__all__ = [
    "SessionActionLog",
    "Subscription",
    "SubscriptionManager",
]
