from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.modules.leads.domain.recorder import LeadRecorder, get_lead_recorder
from app.schemas.leads import LeadCaptureResponse, LeadRecord
from app.shared.core.config import get_settings
from app.shared.core.exceptions import LeadRecordError
from app.shared.core.ops_metrics import LEAD_CAPTURE_FAILURES_TOTAL, LEADS_RECORDED_TOTAL
from app.shared.core.rate_limit import rate_limit

router = APIRouter(tags=["Leads"])
LEADS_ROUTE = "/leads"
# Throttled callers get the same shape as any other capture failure.
RATE_LIMITED_BODY = {"ok": False}
logger = structlog.get_logger()


def _leads_rate_limit() -> str:
    return get_settings().LEADS_RATE_LIMIT


def _failure(reason: str) -> JSONResponse:
    LEAD_CAPTURE_FAILURES_TOTAL.labels(reason=reason).inc()
    return JSONResponse(status_code=500, content={"ok": False})


@router.post(LEADS_ROUTE, response_model=LeadCaptureResponse)
@rate_limit(_leads_rate_limit)
async def capture_lead(
    request: Request,
    recorder: LeadRecorder = Depends(get_lead_recorder),
) -> Any:
    """
    Public lead-capture endpoint for the calculator.

    Always answers ``{"ok": true}`` or ``{"ok": false}``; failure details are
    logged server-side only.
    """
    try:
        body = await request.json()
    except ValueError as exc:
        logger.warning("lead_capture_failed", reason="malformed_body", error=str(exc))
        return _failure("malformed_body")

    try:
        entry = LeadRecord.from_submission(body)
    except ValueError as exc:
        logger.warning("lead_capture_failed", reason="invalid_fields", error=str(exc))
        return _failure("invalid_fields")

    try:
        await recorder.record(entry)
    except LeadRecordError as exc:
        logger.error(
            "lead_capture_failed",
            reason=exc.code,
            error=exc.message,
            details=exc.details,
        )
        return _failure(exc.code)
    except Exception as exc:  # noqa: BLE001
        logger.exception("lead_capture_failed", reason="unexpected", error=str(exc))
        return _failure("unexpected")

    LEADS_RECORDED_TOTAL.inc()
    return LeadCaptureResponse(ok=True)
