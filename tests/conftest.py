import sqlite3
from datetime import datetime
from pathlib import Path

import pytest

from orienteering.adapters.sqlite.migrator import SQLiteMigrator
from orienteering.rules.loader import load_rules
from orienteering.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = str(PROJECT_ROOT / "migrations")


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def rules() -> Rules:
    """The real rules file shipped at the project root."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """A fully migrated SQLite database in a temp dir."""
    path = str(tmp_path / "test.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


@pytest.fixture
def add_entry_class(db_path: str):
    """Insert a row into the entry_classes source table."""

    def _add(event_id: str, race_id: str, class_id: str, name: str) -> None:
        conn = sqlite3.connect(db_path)
        conn.execute(
            "INSERT INTO entry_classes (event_id, race_id, class_id, name) VALUES (?,?,?,?)",
            (event_id, race_id, class_id, name),
        )
        conn.commit()
        conn.close()

    return _add


@pytest.fixture
def add_participant_entry(db_path: str):
    """Insert a row into the participant_entries source table."""

    def _add(
        entry_id: str,
        event_id: str,
        race_id: str,
        class_id: str,
        name: str,
        submitted_at: datetime,
    ) -> None:
        conn = sqlite3.connect(db_path)
        conn.execute(
            "INSERT INTO participant_entries "
            "(id, event_id, race_id, entry_class_id, participant_name, submitted_at) "
            "VALUES (?,?,?,?,?,?)",
            (entry_id, event_id, race_id, class_id, name, submitted_at.isoformat()),
        )
        conn.commit()
        conn.close()

    return _add
