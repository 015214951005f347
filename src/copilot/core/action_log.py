"""Session action log for the triage workspace.

This module provides the ephemeral, ordered record of actions taken against a
case during the current workspace session. The log is serialized into a
triage log entry when the operator saves one. A successful save removes the
actions it persisted.

Ownership:
    Only two writers exist. The action executor appends after a successful
    action; the log persistence workflow removes the actions a successful
    save persisted.
    Everything else reads.

Classes:
    SessionActionLog: Ordered list of action identifiers for the session.

Example:
    >>> log = SessionActionLog()
    >>> log.record("ESCALATE")
    >>> log.record(ActionType.CREATE_TASK)
    >>> log.actions
    ('ESCALATE', 'CREATE_TASK')
    >>> log.to_json()
    '{"actions": ["ESCALATE", "CREATE_TASK"]}'
    >>> log.discard_first(1)
    >>> log.actions
    ('CREATE_TASK',)
"""

from __future__ import annotations

import json

from src.common.triage.models import ActionType, action_name


class SessionActionLog:
    """Ordered record of actions taken during the current session.

    The log is not persisted on its own. Its contents travel with the next
    saved triage log entry.

    Attributes:
        actions: Snapshot of recorded action identifiers, oldest first.
        is_empty: Whether no actions have been recorded.
    """

    def __init__(self) -> None:
        """Initialize an empty log."""
        self._actions: list[str] = []

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        return f"SessionActionLog(actions={self._actions!r})"

    @property
    def actions(self) -> tuple[str, ...]:
        """Return the recorded action identifiers, oldest first.

        Returns:
            An immutable snapshot; later appends do not affect it.
        """
        return tuple(self._actions)

    @property
    def is_empty(self) -> bool:
        """Return whether no actions have been recorded."""
        return not self._actions

    def record(self, action: ActionType | str) -> None:
        """Append an action identifier.

        Args:
            action: The action that succeeded.
        """
        self._actions.append(action_name(action))

    def discard_first(self, count: int) -> None:
        """Remove the oldest ``count`` actions.

        Actions recorded after a save serialized the log survive that save.

        Args:
            count: Number of actions persisted by the save.
        """
        del self._actions[:count]

    def to_json(self) -> str:
        """Serialize the log in the shape stored with triage log entries.

        Returns:
            JSON text of the form ``{"actions": [...]}``.
        """
        return json.dumps({"actions": self._actions})
