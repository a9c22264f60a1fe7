"""
Shared fixtures: every test gets its own SQLite file and a clean settings cache.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from core import config, db


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    for name in ("DATABASE_URL", "LOG_LEVEL", "DATABASE_RESET_ON_STARTUP", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SPEAKER_API_SETTINGS", str(tmp_path / "appsettings.json"))
    config.clear_cache()
    yield
    config.clear_cache()


@pytest.fixture
def database_url(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> str:
    url = f"sqlite+aiosqlite:///{tmp_path / 'speakers.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


@pytest.fixture
def client(database_url: str) -> Iterator[TestClient]:
    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
async def session(database_url: str):
    db.init_engine(database_url)
    await db.create_schema()
    try:
        async with db.session_factory()() as s:
            yield s
    finally:
        await db.close_engine()
