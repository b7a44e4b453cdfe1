"""Shared pytest fixtures.

Every test runs against its own mongomock database, seeded from
`database_seeds/`, so tests never touch a real MongoDB.
"""

from __future__ import annotations

import json
import logging
import os
import textwrap
import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator

import mongomock
import pytest
from loguru import logger

import priors_survey.helpers.database_helpers as dbh
from priors_survey.core.constants import REGISTRY_PATH
from priors_survey.helpers.logging_helpers import LOG_FORMAT, intercept_stdlib_logging
from tests.fakes import FakeClock

REPO_ROOT = Path(__file__).resolve().parent.parent
SEEDS_DIR = REPO_ROOT / "database_seeds"


def pytest_configure(config: pytest.Config) -> None:
    """Keep a DEBUG log of each test session in logs/pytest_YYYYMMDD.log."""
    logs_dir = REPO_ROOT / "logs"
    logs_dir.mkdir(exist_ok=True)
    logger.add(
        logs_dir / f"pytest_{datetime.now():%Y%m%d}.log",
        level="DEBUG",
        format=LOG_FORMAT,
        rotation="00:00",
        retention="7 days",
        compression="zip",
    )
    intercept_stdlib_logging(level=logging.DEBUG)


@pytest.fixture(autouse=True)
def _isolate_db_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point the store helpers at a fresh mongomock database for each test."""
    dbname = f"testdb_{uuid.uuid4().hex}"
    monkeypatch.setenv("MONGO_URI", f"mongodb://localhost:27017/{dbname}")
    monkeypatch.setattr(dbh, "MongoClient", mongomock.MongoClient, raising=True)
    dbh._client = None
    dbh._db = None
    try:
        yield
    finally:
        dbh._client = None
        dbh._db = None


@pytest.fixture(autouse=True)
def _seed_db(_isolate_db_state: None) -> None:
    """Insert every `<collection>.json` seed file (or TEST_SEED_DIR's)."""
    seed_dir = Path(os.getenv("TEST_SEED_DIR", SEEDS_DIR))
    db = dbh.get_db()
    for path in sorted(seed_dir.glob("*.json")):
        docs = json.loads(path.read_text(encoding="utf-8") or "[]")
        if isinstance(docs, dict):
            docs = [docs]
        if docs:
            logger.debug(f"Seeding {len(docs)} docs into '{path.stem}'")
            db[path.stem].insert_many(docs)


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a dedented YAML body to tmp_path/<filename> and return its path."""

    def _write(filename: str, body: str) -> Path:
        file_path = tmp_path / filename
        file_path.write_text(textwrap.dedent(body).strip() + "\n", encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def clock() -> FakeClock:
    """A fake monotonic clock starting at 100s."""
    return FakeClock()


@pytest.fixture
def mark_completed() -> Callable[..., None]:
    """Mark participant ids as complete in the registry."""

    def _mark(*participant_ids: str) -> None:
        dbh.merge(REGISTRY_PATH, {p: True for p in participant_ids})

    return _mark
