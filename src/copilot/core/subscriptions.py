"""Remote-backed data subscriptions for the triage workspace.

This module provides the ``Subscription`` data slot and the
``SubscriptionManager`` that owns the workspace's three slots:

- **context**: case record, recent emails and comments
- **triage**: the backend's priority assessment
- **logs**: recent triage audit records

Each slot re-fetches when the bound case id changes and on explicit refresh.
Slots are independent: a failure in one never clears or invalidates another.

Lifecycle of a slot request:
    1. ``refresh()`` issues a request token and sets ``loading``.
    2. The fetch resolves or raises.
    3. If the token is still current, ``data`` (on success) or ``error``
       (on failure) is set and ``loading`` cleared. Stale data from an earlier
       fetch is kept while a new request is in flight.
    4. A resolution whose token was superseded by a later request, or whose
       case id is no longer bound, is discarded.

Classes:
    Subscription: A single remote-backed data slot.
    SubscriptionManager: Owns the context, triage and logs slots.

Example:
    >>> manager = SubscriptionManager(backend, emitter)
    >>> await manager.bind("500000000000001")
    >>> manager.triage.data.priority_score
    85.0
    >>> await manager.refresh_all()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Generic, TypeVar

from src.common.rpc.backend import TriageBackend
from src.common.triage.errors import normalize_error
from src.common.triage.models import CaseContext, TriageAssessment, TriageLogEntry
from src.common.triage.notifications import NotificationEmitter

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[str], Awaitable[T]]
"""Coroutine function fetching a slot's data for a case id."""

ErrorHandler = Callable[[str, BaseException], None]
"""Callback receiving the normalized message and the raw failure."""


# =============================================================================
# Subscription
# =============================================================================


class Subscription(Generic[T]):
    """A remote-backed data slot keyed by case id.

    Attributes:
        name: Slot name used in logs.
        data: Last successfully fetched value, or None.
        error: Normalized message of the last failure, or None.
        loading: Whether a request for the current case id is in flight.
        last_result: Token of the most recently issued request; an opaque
            handle identifying which refresh produced the current state.
        last_refreshed_at: When data was last applied.
    """

    def __init__(
        self,
        name: str,
        fetch: Fetcher[T],
        on_error: ErrorHandler | None = None,
    ) -> None:
        """Initialize the slot.

        Args:
            name: Slot name used in logs.
            fetch: Coroutine function fetching data for a case id.
            on_error: Optional callback invoked after a failure is recorded.
        """
        self.name = name
        self._fetch = fetch
        self._on_error = on_error
        self.case_id: str | None = None
        self.data: T | None = None
        self.error: str | None = None
        self.loading = False
        self.last_result = 0
        self.last_refreshed_at: datetime | None = None

    def __repr__(self) -> str:
        return (
            f"Subscription(name={self.name!r}, case_id={self.case_id!r}, "
            f"loading={self.loading}, has_data={self.data is not None}, "
            f"error={self.error!r})"
        )

    def bind(self, case_id: str | None) -> None:
        """Key the slot to a case id.

        Switching to a different case drops data and error belonging to the
        previous case. Re-binding the same case id keeps them.

        Args:
            case_id: Case to subscribe to, or None to unbind.
        """
        if case_id == self.case_id:
            return
        self.case_id = case_id
        self.data = None
        self.error = None
        self.loading = False

    def is_current(self, token: int, case_id: str) -> bool:
        """Return whether a resolution still belongs to the latest request."""
        return token == self.last_result and case_id == self.case_id

    async def refresh(self) -> None:
        """Re-fetch data for the bound case id.

        Never raises for fetch failures: they are recorded in ``error``. Does
        nothing when no case id is bound.
        """
        case_id = self.case_id
        if case_id is None:
            logger.debug("Skipping refresh of %s: no case bound", self.name)
            return

        self.last_result += 1
        token = self.last_result
        self.loading = True

        try:
            data = await self._fetch(case_id)
        except Exception as exc:
            if not self.is_current(token, case_id):
                logger.debug(
                    "Discarding stale %s failure for case %s", self.name, case_id
                )
                return
            self.loading = False
            self.error = normalize_error(exc)
            if self._on_error is not None:
                self._on_error(self.error, exc)
            return

        if not self.is_current(token, case_id):
            logger.debug("Discarding stale %s result for case %s", self.name, case_id)
            return
        self.data = data
        self.error = None
        self.loading = False
        self.last_refreshed_at = datetime.now(tz=timezone.utc)


# =============================================================================
# Subscription Manager
# =============================================================================


class SubscriptionManager:
    """Owns the context, triage and logs subscriptions of a workspace.

    Failure policy per slot:
        - context: sticky error notification; the message stays on
          ``context.error`` until the next successful load.
        - triage: sticky error notification prefixed with
          "Failed to compute triage: ".
        - logs: logged only. Audit history is secondary and must not disrupt
          the workspace.

    Attributes:
        case_id: Currently bound case id.
        context: Case context slot.
        triage: Triage assessment slot.
        logs: Recent triage logs slot.
    """

    def __init__(self, backend: TriageBackend, emitter: NotificationEmitter) -> None:
        """Initialize the manager.

        Args:
            backend: Backend providing the three read procedures.
            emitter: Emitter for failure notifications.
        """
        self._emitter = emitter
        self.case_id: str | None = None
        self.context: Subscription[CaseContext] = Subscription(
            "context", backend.get_case_context, self._context_failed
        )
        self.triage: Subscription[TriageAssessment] = Subscription(
            "triage", backend.get_triage_result, self._triage_failed
        )
        self.logs: Subscription[list[TriageLogEntry]] = Subscription(
            "logs", backend.get_recent_triage_logs, self._logs_failed
        )

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        """Return all slots in a fixed order (context, triage, logs)."""
        return (self.context, self.triage, self.logs)

    @property
    def is_loading(self) -> bool:
        """Return whether the primary view is still loading.

        The logs slot does not gate the primary view.
        """
        return self.context.loading or self.triage.loading

    async def bind(self, case_id: str) -> None:
        """Subscribe all slots to a case id and load them.

        Loads run concurrently and resolve in any order. Resolutions for a
        previously bound case id that arrive later are discarded.

        Args:
            case_id: Case to subscribe to.
        """
        if case_id != self.case_id:
            logger.info("Binding workspace subscriptions to case %s", case_id)
        self.case_id = case_id
        for subscription in self.subscriptions:
            subscription.bind(case_id)
        await self.refresh_all()

    async def refresh_all(self) -> None:
        """Refresh all three slots concurrently.

        Returns only once every refresh has settled. A failure in one slot
        does not prevent the others' results from being applied.
        """
        outcomes = await asyncio.gather(
            *(subscription.refresh() for subscription in self.subscriptions),
            return_exceptions=True,
        )
        for subscription, outcome in zip(self.subscriptions, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Unexpected error refreshing %s subscription",
                    subscription.name,
                    exc_info=outcome,
                )

    async def refresh_logs(self) -> None:
        """Refresh only the logs slot."""
        await self.logs.refresh()

    # ------------------------------------------------------------------
    # Failure handlers (private)
    # ------------------------------------------------------------------

    def _context_failed(self, message: str, exc: BaseException) -> None:
        logger.warning("Failed to load case context for %s: %s", self.case_id, message)
        self._emitter.error(message)

    def _triage_failed(self, message: str, exc: BaseException) -> None:
        logger.warning("Failed to compute triage for %s: %s", self.case_id, message)
        self._emitter.error(f"Failed to compute triage: {message}")

    def _logs_failed(self, message: str, exc: BaseException) -> None:
        logger.error(
            "Error loading triage logs for %s: %s",
            self.case_id,
            message,
            exc_info=exc,
        )
