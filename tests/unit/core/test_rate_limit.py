import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from slowapi import Limiter
from slowapi.util import get_remote_address

import app.shared.core.rate_limit as rate_limit_module
from app.shared.core.rate_limit import rate_limit, set_rate_limited_body, setup_rate_limiting


@pytest.fixture
def limited_app(monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    monkeypatch.setattr(
        rate_limit_module,
        "_limiter",
        Limiter(key_func=get_remote_address, storage_uri="memory://"),
    )
    monkeypatch.setattr(rate_limit_module, "_limited_bodies", {})

    app = FastAPI()
    setup_rate_limiting(app)

    @app.post("/capture")
    @rate_limit("1/minute")
    async def capture(request: Request) -> dict[str, bool]:
        return {"ok": True}

    @app.post("/other")
    @rate_limit("1/minute")
    async def other(request: Request) -> dict[str, bool]:
        return {"ok": True}

    set_rate_limited_body("/capture", {"ok": False})
    return app


@pytest.mark.asyncio
async def test_throttled_path_answers_with_registered_body(limited_app: FastAPI) -> None:
    transport = ASGITransport(app=limited_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        first = await client.post("/capture")
        second = await client.post("/capture")

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.json() == {"ok": False}


@pytest.mark.asyncio
async def test_unregistered_path_keeps_default_throttle_body(limited_app: FastAPI) -> None:
    transport = ASGITransport(app=limited_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/other")
        second = await client.post("/other")

    assert second.status_code == 429
    assert "ok" not in second.json()


def test_lead_route_is_registered_for_ok_envelope(app) -> None:
    assert rate_limit_module._limited_bodies["/api/leads"] == {"ok": False}
