"""Pytest configuration and fixtures for the spoilage engine tests.

Provides a fixed evaluation instant, a snapshot factory, the default
policy and an HTTP client bound to the FastAPI app.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import RiskPolicy
from app.main import app
from app.schemas.batch import BatchSnapshot

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ── Time / policy ────────────────────────────────────────────────

@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant so scores are reproducible."""
    return NOW


@pytest.fixture
def policy() -> RiskPolicy:
    return RiskPolicy()


# ── Snapshot factory ─────────────────────────────────────────────

@pytest.fixture
def make_snapshot() -> Callable[..., BatchSnapshot]:
    """Build a snapshot ``days_stored`` days before NOW.

    Defaults describe a batch at ideal conditions with normal gas levels.
    """

    def _make(days_stored: float = 5, **overrides) -> BatchSnapshot:
        fields = {
            "batch_id": "B-001",
            "entry_date": NOW - timedelta(days=days_stored),
            "shelf_life_days": 10,
            "temperature_c": 10,
            "humidity_pct": 65,
            "ethylene": "normal",
            "co2": "normal",
            "ammonia": "normal",
        }
        fields.update(overrides)
        return BatchSnapshot(**fields)

    return _make


@pytest.fixture
def bare_snapshot(make_snapshot) -> BatchSnapshot:
    """No environmental or gas readings at all."""
    return make_snapshot(
        days_stored=0,
        shelf_life_days=20,
        temperature_c=None,
        humidity_pct=None,
        ethylene=None,
        co2=None,
        ammonia=None,
    )


# ── HTTP client ──────────────────────────────────────────────────

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Test client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP API tests")
