"""HTTP client for the case triage backend.

This module provides an httpx-based implementation of ``TriageBackend``. Each
procedure is invoked by POSTing its named parameters as a JSON object to
``{base_url}/{procedureName}``; the JSON response is validated into the
matching Pydantic model.

Failures are raised as ``RemoteCallError``. For HTTP error responses the
parsed response payload is kept on ``body`` so error normalization can read
``body.message`` or a ``body`` list of field errors, the same shapes the
backend produces.

Example:
    >>> async with CaseTriageClient("http://localhost:8080/triage") as client:
    ...     context = await client.get_case_context("500000000000001")
    ...     print(context.case_record.subject)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from src.common.triage.models import (
    ActionResult,
    CaseContext,
    DraftResult,
    TriageAssessment,
    TriageLogEntry,
    action_name,
)

logger = logging.getLogger(__name__)

_LOG_ENTRIES = TypeAdapter(list[TriageLogEntry])


class CaseTriageClient:
    """Client for the case triage backend procedures.

    Example:
        >>> async with CaseTriageClient("http://localhost:8080/triage") as client:
        ...     result = await client.take_action("500000000000001", "ESCALATE")
        ...     result.success
        True
    """

    def __init__(
        self,
        base_url: str,
        httpx_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        api_key: str | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the backend; procedure names are appended.
            httpx_client: Optional httpx AsyncClient to use. If not provided,
                one will be created on context entry.
            timeout: Request timeout in seconds (default: 30.0).
            api_key: Optional API key sent as ``X-API-Key``.
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._api_key = api_key
        self._external_client = httpx_client is not None
        self._httpx_client = httpx_client

    async def __aenter__(self) -> CaseTriageClient:
        """Async context manager entry."""
        if self._httpx_client is None:
            self._httpx_client = httpx.AsyncClient(timeout=self._timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if not self._external_client and self._httpx_client is not None:
            await self._httpx_client.aclose()
            self._httpx_client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure httpx client is available.

        Returns:
            The httpx AsyncClient.

        Raises:
            RuntimeError: If client is not initialized.
        """
        if self._httpx_client is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with' context manager or "
                "call __aenter__ first."
            )
        return self._httpx_client

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["X-API-Key"] = self._api_key
        return headers

    async def call(self, procedure: str, **params: Any) -> Any:
        """Invoke a backend procedure.

        Args:
            procedure: Procedure name (e.g., "getCaseContext").
            **params: Named procedure parameters, sent as a JSON object.

        Returns:
            The decoded JSON response, or None for an empty body.

        Raises:
            RemoteCallError: On transport failure or a non-2xx response.
        """
        client = self._ensure_client()
        url = f"{self.base_url}/{procedure}"
        try:
            response = await client.post(url, json=params, headers=self._headers())
        except httpx.HTTPError as exc:
            raise RemoteCallError(
                f"Could not reach backend for {procedure}: {exc}",
                procedure=procedure,
            ) from exc

        if response.is_error:
            body = _parse_body(response)
            logger.debug(
                "Procedure %s failed with HTTP %d: %r",
                procedure,
                response.status_code,
                body,
            )
            raise RemoteCallError(
                f"{procedure} failed (HTTP {response.status_code})",
                status=response.status_code,
                body=body,
                procedure=procedure,
            )

        if not response.content:
            return None
        return _parse_body(response)

    def _validate(self, procedure: str, validator: Any, payload: Any) -> Any:
        try:
            return validator(payload)
        except ValidationError as exc:
            raise RemoteCallError(
                f"Malformed {procedure} response: {exc.error_count()} validation error(s)",
                procedure=procedure,
                body=payload,
            ) from exc

    # ------------------------------------------------------------------
    # Procedures
    # ------------------------------------------------------------------

    async def get_case_context(self, case_id: str) -> CaseContext:
        """Fetch the case record, recent emails and recent comments."""
        payload = await self.call("getCaseContext", caseId=case_id)
        return self._validate(
            "getCaseContext", CaseContext.model_validate, payload or {}
        )

    async def get_triage_result(self, case_id: str) -> TriageAssessment:
        """Fetch the computed triage assessment."""
        payload = await self.call("getTriageResult", caseId=case_id)
        return self._validate(
            "getTriageResult", TriageAssessment.model_validate, payload or {}
        )

    async def get_recent_triage_logs(self, case_id: str) -> list[TriageLogEntry]:
        """Fetch recent triage log entries, most recent first."""
        payload = await self.call("getRecentTriageLogs", caseId=case_id)
        return self._validate(
            "getRecentTriageLogs", _LOG_ENTRIES.validate_python, payload or []
        )

    async def generate_ai_draft(self, case_id: str) -> DraftResult:
        """Ask the backend to generate an AI reply draft."""
        payload = await self.call("generateAIDraft", caseId=case_id)
        return self._validate(
            "generateAIDraft", DraftResult.model_validate, payload or {}
        )

    async def take_action(self, case_id: str, action_type: str) -> ActionResult:
        """Run a named action against the case."""
        payload = await self.call(
            "takeAction", caseId=case_id, actionType=action_name(action_type)
        )
        return self._validate(
            "takeAction", ActionResult.model_validate, payload or {}
        )

    async def save_triage_log(
        self,
        case_id: str,
        triage_json: str,
        draft_reply: str,
        ai_used: bool,
        action_json: str,
        snapshot_json: str,
        error_msg: str | None = None,
    ) -> None:
        """Persist a triage audit record."""
        await self.call(
            "saveTriageLog",
            caseId=case_id,
            triageJson=triage_json,
            draftReply=draft_reply,
            aiUsed=ai_used,
            actionJson=action_json,
            snapshotJson=snapshot_json,
            errorMsg=error_msg,
        )


def _parse_body(response: httpx.Response) -> Any:
    """Best-effort decoding of a response payload without raising."""
    try:
        return response.json()
    except ValueError:
        text = response.text.strip()
        return text[:400] or None


class RemoteCallError(Exception):
    """Exception raised for backend procedure failures.

    The message is the exception text; backend error details stay on ``body``.

    Attributes:
        status: HTTP status code, or None for transport failures.
        body: Parsed error payload from the backend, if any.
        procedure: Name of the procedure that failed.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: Any = None,
        procedure: str | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Error message.
            status: Optional HTTP status code.
            body: Optional parsed error payload.
            procedure: Optional procedure name.
        """
        super().__init__(message)
        self.status = status
        self.body = body
        self.procedure = procedure
