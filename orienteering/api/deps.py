import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from orienteering.adapters.sqlite.repos import (
    SQLiteEntryClassQuery,
    SQLiteParticipantEntryQuery,
    SQLiteStartListRepo,
)
from orienteering.components.start_list import StartListService
from orienteering.rules.loader import load_rules
from orienteering.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("ORIENTEERING_DATA_DIR", "./data"))
        self.rules_path = Path(
            os.environ.get("ORIENTEERING_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )

    def db_path(self, rules: Rules) -> str:
        return str(self.data_dir / rules.storage.database_file)

    def migrations_dir(self, rules: Rules) -> str:
        return str(self.base_dir / rules.storage.migrations_dir)


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


def get_db_path(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> str:
    return settings.db_path(rules)


# --- Repos ---
def get_start_list_repo(db_path: str = Depends(get_db_path)) -> SQLiteStartListRepo:
    return SQLiteStartListRepo(db_path)


def get_entry_class_query(db_path: str = Depends(get_db_path)) -> SQLiteEntryClassQuery:
    return SQLiteEntryClassQuery(db_path)


def get_participant_entry_query(
    db_path: str = Depends(get_db_path),
) -> SQLiteParticipantEntryQuery:
    return SQLiteParticipantEntryQuery(db_path)


# --- Component Services ---
def get_start_list_service(
    repo: SQLiteStartListRepo = Depends(get_start_list_repo),
    entry_classes: SQLiteEntryClassQuery = Depends(get_entry_class_query),
    participants: SQLiteParticipantEntryQuery = Depends(get_participant_entry_query),
) -> StartListService:
    """Get start list component service."""
    return StartListService(repo=repo, entry_classes=entry_classes, participants=participants)
