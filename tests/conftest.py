from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the tagcard package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tagcard.core import config as core_config  # noqa: E402
from tagcard.core import rate_limiter  # noqa: E402
from tagcard.db.create_tables import create_schema, drop_schema  # noqa: E402
from tagcard.db import session as db_session  # noqa: E402

PUBLIC_BASE = "https://tagcard.test"


@pytest.fixture()
def settings_env(tmp_path, monkeypatch):
    """Point settings at a throwaway SQLite file and uploads dir."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("PUBLIC_BASE_URL", PUBLIC_BASE)
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.delenv("SUPPORT_INBOX", raising=False)
    core_config.get_settings.cache_clear()
    yield tmp_path
    core_config.get_settings.cache_clear()


@pytest.fixture()
def temp_db(settings_env):
    """Create every table on a fresh SQLite database and dispose of it afterwards."""
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = create_schema(reset=True)

    yield settings_env / "test.db"

    try:
        drop_schema(engine)
    finally:
        engine.dispose()
        db_session.get_engine.cache_clear()
        db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def client(temp_db):
    from fastapi.testclient import TestClient

    from tagcard.app import create_app

    rate_limiter.reset_limits()
    with TestClient(create_app()) as test_client:
        yield test_client
    rate_limiter.reset_limits()
