from datetime import UTC, datetime, timedelta

import pytest

from orienteering.adapters.sqlite.repos import (
    SQLiteEntryClassQuery,
    SQLiteParticipantEntryQuery,
    SQLiteStartListRepo,
)
from orienteering.domain.entities import (
    ParticipantCandidate,
    StartListDraft,
    StartListSettings,
)

T0 = datetime(2024, 5, 2, 9, 0, 0, tzinfo=UTC)


@pytest.fixture
def repo(db_path):
    return SQLiteStartListRepo(db_path)


def scheduled_draft() -> StartListDraft:
    settings = StartListSettings.configure(T0, 120, 3)
    draft = StartListDraft.initialize("cup", "long", settings)
    draft = draft.assign_lanes([(1, "A"), (3, "B")], {"A", "B"})
    return draft.schedule_participants(
        [
            ParticipantCandidate(
                participant_entry_id=f"p{i}",
                participant_name=f"Runner {i}",
                entry_class_id="A" if i % 2 else "B",
                submitted_at=T0 - timedelta(days=10 - i),
            )
            for i in range(1, 6)
        ]
    )


def test_get_missing_returns_none(repo):
    assert repo.get_by_event_and_race("cup", "long") is None


def test_save_and_get_round_trip(repo):
    draft = scheduled_draft()

    repo.save(draft)
    loaded = repo.get_by_event_and_race("cup", "long")

    assert loaded == draft
    assert loaded.settings.start_at == T0
    # start times are recomputed from the stored settings
    assert [s.start_time for s in loaded.participant_slots] == [
        s.start_time for s in draft.participant_slots
    ]


def test_save_upserts(repo):
    draft = scheduled_draft()
    repo.save(draft)

    published = draft.finalize()
    repo.save(published)
    loaded = repo.get_by_event_and_race("cup", "long")

    assert loaded.status == "PUBLISHED"
    assert loaded.participant_slots == draft.participant_slots


def test_reconfigure_replaces_stored_lanes(repo):
    draft = scheduled_draft()
    repo.save(draft)

    repo.save(draft.reconfigure(StartListSettings.configure(T0, 60, 2)))
    loaded = repo.get_by_event_and_race("cup", "long")

    assert loaded.settings.lane_count == 2
    assert loaded.lane_assignments == ()
    assert loaded.participant_slots == ()


def test_races_are_isolated(repo):
    repo.save(scheduled_draft())

    assert repo.get_by_event_and_race("cup", "sprint") is None
    assert repo.get_by_event_and_race("other", "long") is None


def test_naive_start_at_is_read_as_utc(repo):
    settings = StartListSettings.configure(datetime(2024, 5, 2, 9, 0, 0), 60, 1)
    repo.save(StartListDraft.initialize("cup", "long", settings))

    loaded = repo.get_by_event_and_race("cup", "long")

    assert loaded.settings.start_at == T0


def test_entry_class_query(db_path, add_entry_class):
    add_entry_class("cup", "long", "M21", "Men 21")
    add_entry_class("cup", "long", "W21", "Women 21")
    add_entry_class("cup", "sprint", "M35", "Men 35")

    classes = SQLiteEntryClassQuery(db_path).find_entry_classes("cup", "long")

    assert [(c.class_id, c.name) for c in classes] == [("M21", "Men 21"), ("W21", "Women 21")]
    assert SQLiteEntryClassQuery(db_path).find_entry_classes("cup", "middle") == []


def test_participant_entry_query(db_path, add_participant_entry):
    add_participant_entry("e2", "cup", "long", "M21", "Second", T0 - timedelta(hours=1))
    add_participant_entry("e1", "cup", "long", "M21", "First", T0 - timedelta(hours=2))
    add_participant_entry("e3", "cup", "sprint", "M21", "Elsewhere", T0)

    entries = SQLiteParticipantEntryQuery(db_path).list_by_race("cup", "long")

    assert [e.entry_id for e in entries] == ["e1", "e2"]
    assert entries[0].submitted_at == T0 - timedelta(hours=2)
    assert entries[0].submitted_at.tzinfo is not None
