"""
StartListService - Start list configuration, lane assignment, scheduling
and publication.

Each operation loads the race's current draft, applies exactly one draft
transition and saves the result as a whole. Concurrent writes for the same
race are left to the repository.

Functional Core - the draft transitions are pure; this module only wires
them to the ports.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from orienteering.domain.entities import (
    ParticipantCandidate,
    StartListDraft,
    StartListSettings,
)
from orienteering.domain.errors import DomainError, NotFoundError, ValidationError

from .models import LaneClassInput
from .ports import EntryClassQueryPort, ParticipantEntryQueryPort, StartListRepoPort

logger = logging.getLogger(__name__)


# --- Parsing ---


def parse_start_at(value: Any) -> datetime:
    """Accept a datetime or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Start time is required", code="start_at_required", field="start_at")
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(
            f"Start time is not a valid ISO-8601 date and time: {value!r}",
            code="invalid_start_at",
            field="start_at",
        ) from e


def require_race_identity(event_id: Any, race_id: Any) -> tuple[str, str]:
    if not isinstance(event_id, str) or not event_id.strip():
        raise ValidationError("Event ID is required", code="event_id_required", field="event_id")
    if not isinstance(race_id, str) or not race_id.strip():
        raise ValidationError("Race ID is required", code="race_id_required", field="race_id")
    return event_id.strip(), race_id.strip()


# --- Start List Service ---


class StartListService:
    """
    Start list service.

    Orchestrates the configure -> assign lanes -> schedule -> finalize
    lifecycle for one race at a time.
    """

    def __init__(
        self,
        repo: StartListRepoPort,
        entry_classes: EntryClassQueryPort,
        participants: ParticipantEntryQueryPort,
    ) -> None:
        """Initialize service."""
        self._repo = repo
        self._entry_classes = entry_classes
        self._participants = participants

    def _load(self, event_id: str, race_id: str) -> StartListDraft:
        draft = self._repo.get_by_event_and_race(event_id, race_id)
        if draft is None:
            raise NotFoundError(
                f"No start list is configured for event {event_id!r}, race {race_id!r}",
                field="race_id",
            )
        return draft

    def _save(self, draft: StartListDraft, action: str) -> StartListDraft:
        saved = self._repo.save(draft)
        logger.info(
            "Start list %s/%s: %s (status=%s, lanes=%d, slots=%d)",
            draft.event_id,
            draft.race_id,
            action,
            draft.status,
            len(draft.lane_assignments),
            len(draft.participant_slots),
        )
        return saved

    def get(self, event_id: str, race_id: str) -> StartListDraft:
        event_id, race_id = require_race_identity(event_id, race_id)
        return self._load(event_id, race_id)

    def configure(
        self,
        event_id: str,
        race_id: str,
        start_at: datetime | str,
        interval_seconds: int,
        lane_count: int,
    ) -> StartListDraft:
        """Create the draft, or reset an existing one to new settings."""
        event_id, race_id = require_race_identity(event_id, race_id)
        settings = StartListSettings.configure(
            parse_start_at(start_at), interval_seconds, lane_count
        )

        existing = self._repo.get_by_event_and_race(event_id, race_id)
        if existing is None:
            draft = StartListDraft.initialize(event_id, race_id, settings)
            return self._save(draft, "configured")

        return self._save(existing.reconfigure(settings), "reconfigured")

    def assign_lanes(
        self,
        event_id: str,
        race_id: str,
        assignments: Iterable[LaneClassInput],
    ) -> StartListDraft:
        event_id, race_id = require_race_identity(event_id, race_id)
        draft = self._load(event_id, race_id)

        entry_classes = self._entry_classes.find_entry_classes(event_id, race_id)
        if not entry_classes:
            raise ValidationError(
                "No entry classes are open for this race",
                code="no_entry_classes",
                field="assignments",
            )

        available = {entry_class.class_id for entry_class in entry_classes}
        pairs = [(a.lane_number, a.entry_class_id) for a in assignments]
        return self._save(draft.assign_lanes(pairs, available), "lanes assigned")

    def schedule_participants(self, event_id: str, race_id: str) -> StartListDraft:
        event_id, race_id = require_race_identity(event_id, race_id)
        draft = self._load(event_id, race_id)

        entries = self._participants.list_by_race(event_id, race_id)
        candidates = [ParticipantCandidate.from_entry(entry) for entry in entries]
        return self._save(draft.schedule_participants(candidates), "participants scheduled")

    def finalize(self, event_id: str, race_id: str) -> StartListDraft:
        event_id, race_id = require_race_identity(event_id, race_id)
        draft = self._load(event_id, race_id)
        return self._save(draft.finalize(), "published")


def log_rejection(error: DomainError, event_id: str, race_id: str) -> None:
    logger.warning(
        "Start list %s/%s rejected (%s): %s", event_id, race_id, error.code, error.message
    )
