"""
Global pytest fixtures for the AutomateROI test suite.

Provides:
- Test environment variables (set before any app import)
- An isolated lead log per test
- Async HTTP client bound to the real app via ASGITransport
"""
import os
from typing import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio

# Set test environment BEFORE any app imports
os.environ["TESTING"] = "true"
os.environ["ENVIRONMENT"] = "development"
os.environ["LEADS_FSYNC"] = "false"
os.environ.setdefault("LEADS_FILE_PATH", "data/test-leads.jsonl")


@pytest.fixture
def leads_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point LEADS_FILE_PATH at a fresh, not-yet-created file for this test."""
    from app.shared.core.config import get_settings

    path = tmp_path / "data" / "leads.jsonl"
    monkeypatch.setenv("LEADS_FILE_PATH", str(path))
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


@pytest.fixture
def app():
    """Use the real AutomateROI app for integration tests."""
    from app.main import app as automate_roi_app

    return automate_roi_app


@pytest_asyncio.fixture
async def async_client(app, leads_file) -> AsyncGenerator:
    """Async test client for FastAPI with an isolated lead log."""
    from httpx import AsyncClient, ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def ac(async_client):
    """Alias for async_client."""
    return async_client
