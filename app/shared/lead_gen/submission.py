"""
Caller-side helper for the calculator UI backend: fetch estimates and submit
leads to the AutomateROI API.

Lead submission is best-effort. ``submit_in_background`` dispatches the POST
as an asyncio task whose failure is logged and discarded, so displaying the
estimate never waits on (or breaks because of) the lead recorder.
"""

import asyncio
from typing import Any, Mapping, Optional

import httpx
import structlog

from app.schemas.estimation import EstimationInput, EstimationResult

logger = structlog.get_logger()

LEADS_PATH = "/api/leads"
ESTIMATE_PATH = "/api/estimate"


class LeadSubmissionClient:
    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=5.0),
            headers={"User-Agent": "AutomateROI-Client/0.1"},
        )
        self._pending: set[asyncio.Task[bool]] = set()

    async def __aenter__(self) -> "LeadSubmissionClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._owns_client:
            await self._client.aclose()

    async def estimate(self, inputs: EstimationInput) -> EstimationResult:
        response = await self._client.post(
            ESTIMATE_PATH, json=inputs.model_dump(mode="json", by_alias=True)
        )
        response.raise_for_status()
        return EstimationResult.model_validate(response.json())

    async def submit(self, payload: Mapping[str, Any]) -> bool:
        """
        POST a lead. Returns True only for a 200 ``{"ok": true}`` reply.
        Transport errors propagate to the caller.
        """
        response = await self._client.post(LEADS_PATH, json=dict(payload))
        if response.status_code != 200:
            return False
        try:
            body = response.json()
        except ValueError:
            return False
        return isinstance(body, dict) and body.get("ok") is True

    def submit_in_background(self, payload: Mapping[str, Any]) -> "asyncio.Task[bool]":
        """Fire-and-forget submission. The returned task never raises."""
        task = asyncio.create_task(self._submit_quietly(dict(payload)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _submit_quietly(self, payload: dict[str, Any]) -> bool:
        try:
            accepted = await self.submit(payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning("lead_submission_failed", error=str(exc))
            return False
        if not accepted:
            logger.warning("lead_submission_rejected")
        return accepted


def build_lead_payload(
    inputs: EstimationInput,
    email: str,
    result: Optional[EstimationResult] = None,
) -> dict[str, Any]:
    """Lead body in the wire shape: the form fields, the email and the shown result."""
    payload = inputs.model_dump(mode="json", by_alias=True)
    payload["email"] = email
    payload["result"] = (
        result.model_dump(mode="json", by_alias=True) if result is not None else None
    )
    return payload
