"""
Unified Error Governance

Centrally handles exception classification, structured logging,
and OpenTelemetry span recording.
"""

from typing import Optional
from uuid import uuid4

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from opentelemetry import trace

from app.shared.core.config import get_settings
from app.shared.core.exceptions import AutomateROIException
from app.shared.core.ops_metrics import API_ERRORS_TOTAL

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

# Codes whose messages are safe to return verbatim in production.
_SAFE_CODES = {"value_error", "not_found"}


def handle_exception(
    request: Request, exc: Exception, error_id: Optional[str] = None
) -> JSONResponse:
    """
    Classifies and records exceptions, returning a standardized JSON response.
    """
    error_id = error_id or str(uuid4())
    is_prod = get_settings().is_production_like

    if isinstance(exc, AutomateROIException):
        app_exc = exc
        if is_prod and app_exc.code not in _SAFE_CODES:
            app_exc = AutomateROIException(
                message="An error occurred while processing your request",
                code=exc.code,
                status_code=exc.status_code,
            )
        logger.warning(
            "application_error",
            code=exc.code,
            error=exc.message,
            error_id=error_id,
            path=request.url.path,
        )
    elif isinstance(exc, ValueError):
        msg = "Invalid request parameters" if is_prod else str(exc)
        app_exc = AutomateROIException(
            message=msg,
            code="value_error",
            status_code=400,
        )
        logger.warning(
            "business_validation_error",
            error=str(exc),
            error_id=error_id,
            path=request.url.path,
        )
    else:
        # Always sanitize unhandled exceptions to avoid leaking internals.
        app_exc = AutomateROIException(
            message="An unexpected internal error occurred",
            code="internal_error",
            status_code=500,
        )
        logger.error(
            "unhandled_raw_exception",
            error=str(exc),
            error_id=error_id,
            path=request.url.path,
            exc_info=exc,
        )

    with tracer.start_as_current_span("handle_exception") as span:
        span.set_attribute("error.id", error_id)
        span.set_attribute("http.path", request.url.path)
        span.set_attribute("http.method", request.method)
        app_exc.record_to_otel()

    API_ERRORS_TOTAL.labels(
        path=request.url.path,
        method=request.method,
        status_code=app_exc.status_code,
    ).inc()

    return JSONResponse(
        status_code=app_exc.status_code,
        content={
            "error": app_exc.code.replace("_", " ").title(),
            "code": app_exc.code.upper(),
            "message": app_exc.message,
            "error_id": error_id,
        },
    )
