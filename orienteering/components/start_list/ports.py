"""
Start list component - Port interfaces.

The entry-class and participant queries are read-only views owned by the
entry-reception and participant-entry contexts.
"""

from __future__ import annotations

from typing import Protocol

from orienteering.domain.entities import (
    EntryClassSummary,
    ParticipantEntrySummary,
    StartListDraft,
)


class StartListRepoPort(Protocol):
    """Repository interface for start list drafts."""

    def save(self, draft: StartListDraft) -> StartListDraft:
        """Insert or replace the draft for (event_id, race_id)."""
        ...

    def get_by_event_and_race(self, event_id: str, race_id: str) -> StartListDraft | None:
        """Get the draft for a race, if any."""
        ...


class EntryClassQueryPort(Protocol):
    """Entry classes currently open for a race."""

    def find_entry_classes(self, event_id: str, race_id: str) -> list[EntryClassSummary]:
        ...


class ParticipantEntryQueryPort(Protocol):
    """Participant entries registered for a race, in any order."""

    def list_by_race(self, event_id: str, race_id: str) -> list[ParticipantEntrySummary]:
        ...
