import sys
from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import platecoach.models  # noqa: E402,F401
from platecoach.core import settings as settings_module  # noqa: E402
from platecoach.core.db import Base  # noqa: E402


@pytest.fixture
def settings_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "missing-config.json"))
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("COACH_PERSONAS", raising=False)
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


@pytest.fixture
def client(settings_env):
    from platecoach.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def pin_clock(client):
    """Freezes the request clock used by the food log routes."""
    from platecoach.main import app
    from platecoach.utils.timezone import get_clock

    def _pin(instant: datetime) -> None:
        app.dependency_overrides[get_clock] = lambda: (lambda: instant)

    return _pin


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()
