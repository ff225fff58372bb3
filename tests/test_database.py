"""
Tests for database initialization.
"""
import pytest

import models.database as database
from config import reset_settings


@pytest.fixture
def isolated_database(monkeypatch):
    """Restore the module-level engine and session factory after the test."""
    monkeypatch.setattr(database, "engine", None)
    monkeypatch.setattr(database, "SessionLocal", None)
    yield database
    if database.engine is not None:
        database.engine.dispose()
    reset_settings()


def test_init_db_uses_configured_database_url(isolated_database, monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path / 'catalog.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    reset_settings()

    engine = isolated_database.init_db()
    isolated_database.create_tables()

    assert str(engine.url) == url
    assert (tmp_path / "catalog.db").exists()


def test_session_requires_init_db(isolated_database):
    with pytest.raises(RuntimeError, match="not initialized"):
        with isolated_database.get_db_session():
            pass
