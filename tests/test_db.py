from __future__ import annotations

import json
from pathlib import Path

import pytest

from core import config, db


def test_default_backend_on_windows_is_postgres():
    assert db.database_url(platform="win32") == db.WINDOWS_DEFAULT_URL
    assert db.WINDOWS_DEFAULT_URL.startswith("postgresql+asyncpg://")


@pytest.mark.parametrize("platform", ["linux", "darwin"])
def test_default_backend_elsewhere_is_sqlite_file(platform: str):
    assert db.database_url(platform=platform) == db.SQLITE_DEFAULT_URL
    assert db.is_sqlite(db.database_url(platform=platform))


def test_configured_url_wins_over_platform(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    assert db.database_url(platform="win32") == "sqlite+aiosqlite:///./other.db"


def test_postgres_url_gets_async_driver_and_drops_sslmode(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db:5432/speakers?sslmode=require&application_name=api")
    assert db.database_url() == "postgresql+asyncpg://u:p@db:5432/speakers?application_name=api"


def test_plain_sqlite_url_gets_async_driver(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./speakers.db")
    assert db.database_url() == "sqlite+aiosqlite:///./speakers.db"


def test_connection_string_from_settings_file(tmp_path: Path):
    (tmp_path / "appsettings.json").write_text(
        json.dumps({"ConnectionStrings": {"DefaultConnection": "postgresql://localhost/talks"}})
    )
    config.clear_cache()
    assert db.database_url(platform="linux") == "postgresql+asyncpg://localhost/talks"


def test_unparseable_connection_string_is_a_config_error(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "Data Source=speakers.db")
    with pytest.raises(config.ConfigError):
        db.database_url()


def test_accessors_require_initialized_engine():
    with pytest.raises(RuntimeError):
        db.engine()
    with pytest.raises(RuntimeError):
        db.session_factory()


async def test_schema_reset_drops_existing_rows(database_url: str):
    from speakers import repository

    db.init_engine(database_url)
    try:
        await db.create_schema()
        async with db.session_factory()() as session:
            await repository.create_speaker(session, name="Kept until reset")

        await db.create_schema()
        async with db.session_factory()() as session:
            assert len(await repository.list_speakers(session)) == 1

        await db.create_schema(reset=True)
        async with db.session_factory()() as session:
            assert await repository.list_speakers(session) == []
    finally:
        await db.close_engine()
