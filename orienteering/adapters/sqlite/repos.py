import json
import sqlite3
from datetime import UTC, datetime
from typing import Any

from orienteering.domain.entities import (
    EntryClassSummary,
    LaneAssignment,
    ParticipantEntrySummary,
    ParticipantSlot,
    StartListDraft,
    StartListSettings,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteStartListRepo(_SQLiteRepo):
    """
    One row per (event_id, race_id). Lanes and slots are JSON columns; slot
    start times are not stored and are recomputed from the settings on load.
    """

    def save(self, draft: StartListDraft) -> StartListDraft:
        settings = draft.settings
        lanes = [
            {"lane_number": a.lane_number, "entry_class_id": a.entry_class_id}
            for a in draft.lane_assignments
        ]
        slots = [
            {
                "lane_number": s.lane_number,
                "entry_class_id": s.entry_class_id,
                "participant_entry_id": s.participant_entry_id,
                "participant_name": s.participant_name,
                "sequence": s.sequence,
            }
            for s in draft.participant_slots
        ]

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO start_lists (
                    event_id, race_id, start_at, interval_seconds, lane_count,
                    lane_assignments, participant_slots, is_finalized, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(event_id, race_id) DO UPDATE SET
                    start_at=excluded.start_at,
                    interval_seconds=excluded.interval_seconds,
                    lane_count=excluded.lane_count,
                    lane_assignments=excluded.lane_assignments,
                    participant_slots=excluded.participant_slots,
                    is_finalized=excluded.is_finalized,
                    updated_at=excluded.updated_at
            """,
                (
                    draft.event_id,
                    draft.race_id,
                    settings.start_at.isoformat(),
                    settings.interval_seconds,
                    settings.lane_count,
                    json.dumps(lanes),
                    json.dumps(slots),
                    1 if draft.finalized else 0,
                    datetime.now(UTC).isoformat(),
                ),
            )
            conn.commit()
            return draft
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_event_and_race(self, event_id: str, race_id: str) -> StartListDraft | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM start_lists WHERE event_id = ? AND race_id = ?",
                (event_id, race_id),
            ).fetchone()
        finally:
            conn.close()

        if not row:
            return None
        return self._row_to_draft(row)

    def _row_to_draft(self, row: dict[str, Any]) -> StartListDraft:
        settings = StartListSettings.configure(
            datetime.fromisoformat(row["start_at"]),
            row["interval_seconds"],
            row["lane_count"],
        )
        lanes = [
            LaneAssignment.assign(item["lane_number"], item["entry_class_id"], settings)
            for item in json.loads(row["lane_assignments"] or "[]")
        ]
        slots = [
            ParticipantSlot.schedule(
                participant_entry_id=item["participant_entry_id"],
                participant_name=item["participant_name"],
                entry_class_id=item["entry_class_id"],
                lane_number=item["lane_number"],
                sequence=item["sequence"],
                settings=settings,
            )
            for item in json.loads(row["participant_slots"] or "[]")
        ]
        return StartListDraft.restore(
            event_id=row["event_id"],
            race_id=row["race_id"],
            settings=settings,
            lane_assignments=lanes,
            participant_slots=slots,
            finalized=bool(row["is_finalized"]),
        )


class SQLiteEntryClassQuery(_SQLiteRepo):
    def find_entry_classes(self, event_id: str, race_id: str) -> list[EntryClassSummary]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT class_id, name FROM entry_classes "
                "WHERE event_id = ? AND race_id = ? ORDER BY class_id ASC",
                (event_id, race_id),
            ).fetchall()
            return [EntryClassSummary(class_id=r["class_id"], name=r["name"]) for r in rows]
        finally:
            conn.close()


class SQLiteParticipantEntryQuery(_SQLiteRepo):
    def list_by_race(self, event_id: str, race_id: str) -> list[ParticipantEntrySummary]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT id, entry_class_id, participant_name, submitted_at "
                "FROM participant_entries WHERE event_id = ? AND race_id = ? "
                "ORDER BY submitted_at ASC",
                (event_id, race_id),
            ).fetchall()
            return [
                ParticipantEntrySummary(
                    entry_id=r["id"],
                    entry_class_id=r["entry_class_id"],
                    participant_name=r["participant_name"],
                    submitted_at=datetime.fromisoformat(r["submitted_at"]),
                )
                for r in rows
            ]
        finally:
            conn.close()
