"""
Pytest fixtures for IOC fusion tests. Uses a temporary SQLite DB for ioc_history
and reloads scoring tables from the bundled defaults for every test.
"""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def default_scoring_tables(monkeypatch):
    """Ignore any operator tables file and drop the cached tables around each test."""
    monkeypatch.delenv("IOCFUSION_SCORING_TABLES", raising=False)

    from backend_iocfusion.config import reset_scoring_tables_for_test

    reset_scoring_tables_for_test()
    yield
    reset_scoring_tables_for_test()


@pytest.fixture
def history_db(tmp_path, monkeypatch):
    """
    Point ioc_history at a temporary SQLite DB and create the table.
    Resets engine cache so each test gets a fresh DB. Unset DB URLs so we use SQLite.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("IOCFUSION_DB_URL", raising=False)
    monkeypatch.setenv("IOC_HISTORY_DB_PATH", str(tmp_path / "ioc_history.db"))

    import backend_iocfusion.history.db_ioc_history as db

    db.reset_engine_for_test()
    db.init_db()
    yield db
    db.reset_engine_for_test()


@pytest.fixture
def client(history_db):
    """FastAPI TestClient. Depends on history_db so the temp DB is set before the app runs."""
    from fastapi.testclient import TestClient

    from backend_iocfusion.api_server.server import app

    return TestClient(app)
