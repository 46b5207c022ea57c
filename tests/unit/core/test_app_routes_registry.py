from __future__ import annotations

import pytest
from fastapi import APIRouter, FastAPI

from app.shared.core.app_routes import (
    _validate_router_registry,
    register_api_routers,
)


def _router(*routes: tuple[str, str]) -> APIRouter:
    router = APIRouter()
    for method, path in routes:
        router.add_api_route(path, lambda: None, methods=[method])
    return router


def _complete_router() -> APIRouter:
    return _router(("POST", "/leads"), ("POST", "/estimate"), ("GET", "/catalog"))


def test_validate_router_registry_accepts_complete_registry() -> None:
    _validate_router_registry([(_complete_router(), "/api")])


def test_validate_router_registry_rejects_missing_route() -> None:
    with pytest.raises(RuntimeError, match="missing required API routes: POST /api/leads"):
        _validate_router_registry(
            [(_router(("POST", "/estimate"), ("GET", "/catalog")), "/api")]
        )


def test_validate_router_registry_rejects_duplicate_route() -> None:
    with pytest.raises(RuntimeError, match="Duplicate route registered: POST /api/leads"):
        _validate_router_registry(
            [(_complete_router(), "/api"), (_router(("POST", "/leads")), "/api")]
        )


def test_validate_router_registry_rejects_empty_router() -> None:
    with pytest.raises(RuntimeError, match="empty router"):
        _validate_router_registry([(APIRouter(), "/api")])


def test_validate_router_registry_rejects_prefix_without_leading_slash() -> None:
    with pytest.raises(RuntimeError, match="must start with '/'"):
        _validate_router_registry([(_complete_router(), "api")])


def test_register_api_routers_mounts_public_routes() -> None:
    app = FastAPI()
    register_api_routers(app)
    paths = app.openapi()["paths"]
    assert "post" in paths["/api/leads"]
    assert "post" in paths["/api/estimate"]
    assert "get" in paths["/api/catalog"]
