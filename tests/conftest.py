"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path
from typing import Dict, Any

from jobly.app import seed_sample_data
from jobly.database import Database, QueryResult, init_database
from jobly.logger import reset_logger
from jobly.repositories import JobRepository


@pytest.fixture(autouse=True)
def fresh_logger(monkeypatch):
    """Give every test its own console-only logger."""
    monkeypatch.delenv("JOBLY_LOG_DIR", raising=False)
    monkeypatch.delenv("JOBLY_LOG_LEVEL", raising=False)
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def db_path(tmp_path) -> Path:
    """SQLite file with tables created and sample companies/jobs inserted."""
    path = tmp_path / "jobly_test.db"
    init_database(path)
    seed_sample_data(path)
    return path


@pytest.fixture
def db(db_path):
    database = Database(db_path)
    yield database
    database.close()


@pytest.fixture
def repo(db) -> JobRepository:
    return JobRepository(db)


@pytest.fixture
def job_ids(db) -> Dict[str, int]:
    """Sample job ids keyed by title."""
    rows = db.query("SELECT id, title FROM jobs").rows
    return {r["title"]: r["id"] for r in rows}


@pytest.fixture
def new_job() -> Dict[str, Any]:
    """Valid creation payload."""
    return {
        "title": "New",
        "salary": 150,
        "equity": 0.05,
        "company_handle": "c2",
    }


class RecordingDB:
    """Stand-in query primitive that records SQL and returns canned rows."""

    def __init__(self, *results):
        self.calls = []
        self._results = list(results)

    def query(self, sql, params=()):
        self.calls.append((sql, list(params)))
        rows = self._results.pop(0) if self._results else []
        return QueryResult(rows)


@pytest.fixture
def recording_db():
    return RecordingDB
