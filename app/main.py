from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from app.shared.core.app_routes import register_api_routers, register_lifecycle_routes
from app.shared.core.config import get_settings, reload_settings_from_environment
from app.shared.core.exceptions import AutomateROIException
from app.shared.core.logging import setup_logging
from app.shared.core.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from app.shared.core.ops_metrics import API_ERRORS_TOTAL
from app.shared.core.rate_limit import setup_rate_limiting
from app.shared.core.tracing import setup_tracing

setup_logging()
settings = get_settings()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    global settings
    settings = reload_settings_from_environment()
    logger.info(
        "app_starting",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        leads_file=settings.LEADS_FILE_PATH,
    )

    from app.modules.leads.domain.recorder import get_lead_recorder

    if not get_lead_recorder().is_writable():
        # Keep serving estimates; lead capture will answer ok:false until fixed.
        logger.error("lead_store_not_writable", path=settings.LEADS_FILE_PATH)

    yield

    logger.info("app_shutting_down")


automate_roi_app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)
# Uvicorn looks for 'app' by default.
app: FastAPI = automate_roi_app

__all__ = ["app", "automate_roi_app", "lifespan"]

setup_tracing(automate_roi_app)


@automate_roi_app.exception_handler(AutomateROIException)
async def automate_roi_exception_handler(
    request: Request, exc: AutomateROIException
) -> JSONResponse:
    """Handle custom application exceptions."""
    from app.shared.core.error_governance import handle_exception

    return handle_exception(request, exc)


@automate_roi_app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with standardized format."""
    detail_text = str(exc.detail) if isinstance(exc.detail, str) else "Request failed"
    if settings.is_production_like and exc.status_code >= 500:
        error_text = "Internal Server Error"
        message_text = "An unexpected internal error occurred"
    else:
        error_text = detail_text
        message_text = detail_text

    API_ERRORS_TOTAL.labels(
        path=request.url.path, method=request.method, status_code=exc.status_code
    ).inc()
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": error_text,
            "code": "HTTP_ERROR",
            "message": message_text,
        },
        headers=getattr(exc, "headers", None),
    )


@automate_roi_app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle business logic ValueErrors via central governance."""
    from app.shared.core.error_governance import handle_exception

    return handle_exception(request, exc)


@automate_roi_app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions with sanitized responses."""
    from app.shared.core.error_governance import handle_exception

    return handle_exception(request, exc)


setup_rate_limiting(automate_roi_app)

register_lifecycle_routes(
    automate_roi_app,
    app_name=settings.APP_NAME,
    version=settings.VERSION,
)

Instrumentator().instrument(automate_roi_app).expose(automate_roi_app)

# Middleware is processed in REVERSE order of addition.
# CORS must be added LAST so it processes FIRST for incoming requests.
automate_roi_app.add_middleware(GZipMiddleware, minimum_size=1000)
automate_roi_app.add_middleware(SecurityHeadersMiddleware)
automate_roi_app.add_middleware(RequestIDMiddleware)

# The calculator UI posts leads cross-origin without cookies.
cors_allowed_origins = [o for o in settings.CORS_ORIGINS if o != "*"]
if len(cors_allowed_origins) != len(settings.CORS_ORIGINS):
    logger.warning("wildcard_cors_origin_ignored")

automate_roi_app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

register_api_routers(automate_roi_app)
