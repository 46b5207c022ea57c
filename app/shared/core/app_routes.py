from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import Gauge

SYSTEM_HEALTH = Gauge(
    "automate_roi_system_health",
    "System health status (1=healthy, 0=unhealthy)",
)

_REQUIRED_API_PATHS = {
    ("POST", "/api/leads"),
    ("POST", "/api/estimate"),
    ("GET", "/api/catalog"),
}


def _validate_router_registry(routes: list[tuple[APIRouter, str]]) -> None:
    seen: set[tuple[str, str]] = set()
    for router, prefix in routes:
        if not router.routes:
            raise RuntimeError("Router registry includes an empty router definition")
        if not prefix.startswith("/"):
            raise RuntimeError(f"Router prefix must start with '/': {prefix!r}")
        for route in router.routes:
            for method in sorted(getattr(route, "methods", None) or ()):
                key = (method, prefix + getattr(route, "path", ""))
                if key in seen:
                    raise RuntimeError(f"Duplicate route registered: {key[0]} {key[1]}")
                seen.add(key)

    missing = sorted(_REQUIRED_API_PATHS - seen)
    if missing:
        raise RuntimeError(
            "Router registry is missing required API routes: "
            + ", ".join(f"{m} {p}" for m, p in missing)
        )


def register_lifecycle_routes(
    app: FastAPI,
    *,
    app_name: str,
    version: str,
) -> None:
    """Register lifecycle and health endpoints."""

    @app.get("/", tags=["Lifecycle"])
    async def root() -> dict[str, str]:
        """Root endpoint for basic reachability."""
        return {"status": "ok", "app": app_name, "version": version}

    @app.get("/health/live", tags=["Lifecycle"])
    async def liveness_check() -> dict[str, str]:
        """Fast liveness check without dependencies."""
        return {"status": "healthy"}

    @app.get("/health", tags=["Lifecycle"])
    async def health_check() -> Any:
        """Readiness check: the lead log must be writable."""
        from app.modules.leads.domain.recorder import get_lead_recorder

        recorder = get_lead_recorder()
        writable = recorder.is_writable()
        SYSTEM_HEALTH.set(1.0 if writable else 0.0)

        health = {
            "status": "healthy" if writable else "unhealthy",
            "lead_store": {"status": "up" if writable else "down"},
        }
        if not writable:
            return JSONResponse(status_code=503, content=health)
        return health


def register_api_routers(app: FastAPI) -> None:
    """Register API route modules in one place to keep app entrypoint focused."""
    from app.modules.estimation.api.v1.estimate import router as estimate_router
    from app.modules.leads.api.v1.leads import (
        LEADS_ROUTE,
        RATE_LIMITED_BODY,
        router as leads_router,
    )
    from app.shared.core.rate_limit import set_rate_limited_body

    routes: list[tuple[APIRouter, str]] = [
        (estimate_router, "/api"),
        (leads_router, "/api"),
    ]

    _validate_router_registry(routes)

    for router, prefix in routes:
        app.include_router(router, prefix=prefix)
        if router is leads_router:
            set_rate_limited_body(prefix + LEADS_ROUTE, RATE_LIMITED_BODY)
