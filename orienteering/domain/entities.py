from __future__ import annotations

from collections.abc import Iterable, Set
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from orienteering.domain.errors import StateError, ValidationError
from orienteering.domain.state import StartListStatus, require_transition, status_of

# --- Helpers ---


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid count or lane number
    return isinstance(value, int) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return _is_int(value) and value > 0


def _require_text(value: Any, message: str, field: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(message, code=f"{field}_required", field=field)
    return text


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# --- Settings ---


class StartListSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_at: datetime
    interval_seconds: int
    lane_count: int

    @classmethod
    def configure(cls, start_at: Any, interval_seconds: Any, lane_count: Any) -> StartListSettings:
        if not isinstance(start_at, datetime):
            raise ValidationError(
                "Start time must be a valid date and time",
                code="invalid_start_at",
                field="start_at",
            )
        if not _is_positive_int(interval_seconds):
            raise ValidationError(
                "Start interval must be a positive whole number of seconds",
                code="invalid_interval_seconds",
                field="interval_seconds",
            )
        if not _is_positive_int(lane_count):
            raise ValidationError(
                "Lane count must be a whole number of at least 1",
                code="invalid_lane_count",
                field="lane_count",
            )
        return cls(
            start_at=as_utc(start_at),
            interval_seconds=interval_seconds,
            lane_count=lane_count,
        )

    def calculate_start_time(self, sequence: Any) -> datetime:
        """
        Start time for the slot at ``sequence``.

        One wave is one sweep over every physical lane, so the wave index is
        ``sequence // lane_count`` and each wave starts ``interval_seconds``
        after the previous one.
        """
        if not _is_int(sequence) or sequence < 0:
            raise ValidationError(
                "Sequence must be a whole number of at least 0",
                code="invalid_sequence",
                field="sequence",
            )
        wave = sequence // self.lane_count
        try:
            return self.start_at + timedelta(seconds=wave * self.interval_seconds)
        except OverflowError as e:
            raise ValidationError(
                f"Sequence {sequence} is beyond the representable start times",
                code="invalid_sequence",
                field="sequence",
            ) from e


# --- Lane Assignment ---


class LaneAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    lane_number: int
    entry_class_id: str

    @classmethod
    def assign(
        cls, lane_number: Any, entry_class_id: Any, settings: StartListSettings
    ) -> LaneAssignment:
        if not _is_positive_int(lane_number):
            raise ValidationError(
                "Lane number must be a whole number of at least 1",
                code="invalid_lane_number",
                field="lane_number",
            )
        if lane_number > settings.lane_count:
            raise ValidationError(
                f"Lane {lane_number} exceeds the configured lane count ({settings.lane_count})",
                code="lane_out_of_range",
                field="lane_number",
            )
        class_id = _require_text(entry_class_id, "Entry class ID is required", "entry_class_id")
        return cls(lane_number=lane_number, entry_class_id=class_id)


# --- Participant Slot ---


class ParticipantSlot(BaseModel):
    """A participant's place in the start order. Built only via ``schedule``."""

    model_config = ConfigDict(frozen=True)

    participant_entry_id: str
    participant_name: str
    entry_class_id: str
    lane_number: int
    sequence: int
    start_time: datetime

    @classmethod
    def schedule(
        cls,
        participant_entry_id: Any,
        participant_name: Any,
        entry_class_id: Any,
        lane_number: Any,
        sequence: Any,
        settings: StartListSettings,
    ) -> ParticipantSlot:
        entry_id = _require_text(
            participant_entry_id, "Participant entry ID is required", "participant_entry_id"
        )
        name = _require_text(participant_name, "Participant name is required", "participant_name")
        class_id = _require_text(entry_class_id, "Entry class ID is required", "entry_class_id")

        if not _is_positive_int(lane_number):
            raise ValidationError(
                "Lane number must be a whole number of at least 1",
                code="invalid_lane_number",
                field="lane_number",
            )
        if lane_number > settings.lane_count:
            raise ValidationError(
                f"Lane {lane_number} exceeds the configured lane count ({settings.lane_count})",
                code="lane_out_of_range",
                field="lane_number",
            )

        start_time = settings.calculate_start_time(sequence)

        return cls(
            participant_entry_id=entry_id,
            participant_name=name,
            entry_class_id=class_id,
            lane_number=lane_number,
            sequence=sequence,
            start_time=start_time,
        )


# --- Read models supplied by other contexts ---


class EntryClassSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    class_id: str
    name: str


class ParticipantEntrySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_id: str
    entry_class_id: str
    participant_name: str
    submitted_at: datetime

    @field_validator("submitted_at")
    @classmethod
    def _submitted_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class ParticipantCandidate(BaseModel):
    """A participant waiting to be placed in the start order."""

    model_config = ConfigDict(frozen=True)

    participant_entry_id: str
    participant_name: str
    entry_class_id: str
    submitted_at: datetime

    @field_validator("submitted_at")
    @classmethod
    def _submitted_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @classmethod
    def from_entry(cls, entry: ParticipantEntrySummary) -> ParticipantCandidate:
        return cls(
            participant_entry_id=entry.entry_id,
            participant_name=entry.participant_name,
            entry_class_id=entry.entry_class_id,
            submitted_at=entry.submitted_at,
        )


# --- Start List Draft (aggregate root) ---


class StartListDraft(BaseModel):
    """
    Start list for one race, identified by (event_id, race_id).

    Every transition returns a new draft; a published draft rejects all of them.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str
    race_id: str
    settings: StartListSettings
    lane_assignments: tuple[LaneAssignment, ...] = ()
    participant_slots: tuple[ParticipantSlot, ...] = ()
    finalized: bool = False

    @model_validator(mode="after")
    def _check_invariants(self) -> StartListDraft:
        _require_text(self.event_id, "Event ID is required", "event_id")
        _require_text(self.race_id, "Race ID is required", "race_id")

        if self.participant_slots and not self.lane_assignments:
            raise ValidationError(
                "Participant slots require lane assignments",
                code="slots_without_lanes",
                field="participant_slots",
            )

        assigned = {a.entry_class_id for a in self.lane_assignments}
        for slot in self.participant_slots:
            if slot.entry_class_id not in assigned:
                raise ValidationError(
                    f"unassigned class: {slot.entry_class_id} has no lane",
                    code="unassigned_class",
                    field="participant_slots",
                )
            if slot.start_time != self.settings.calculate_start_time(slot.sequence):
                raise ValidationError(
                    f"Start time of entry {slot.participant_entry_id!r} does not match "
                    f"sequence {slot.sequence}",
                    code="start_time_mismatch",
                    field="participant_slots",
                )
        return self

    @property
    def status(self) -> StartListStatus:
        return status_of(self.finalized)

    @classmethod
    def initialize(
        cls, event_id: Any, race_id: Any, settings: StartListSettings | None
    ) -> StartListDraft:
        event = _require_text(event_id, "Event ID is required", "event_id")
        race = _require_text(race_id, "Race ID is required", "race_id")
        if settings is None:
            raise ValidationError(
                "Start list settings are required", code="settings_required", field="settings"
            )
        return cls(event_id=event, race_id=race, settings=settings)

    @classmethod
    def restore(
        cls,
        event_id: Any,
        race_id: Any,
        settings: StartListSettings | None,
        lane_assignments: Iterable[LaneAssignment] = (),
        participant_slots: Iterable[ParticipantSlot] = (),
        finalized: bool = False,
    ) -> StartListDraft:
        """Rebuild a persisted draft, re-checking the cross-field invariants."""
        draft = cls.initialize(event_id, race_id, settings)
        return cls(
            event_id=draft.event_id,
            race_id=draft.race_id,
            settings=draft.settings,
            lane_assignments=tuple(lane_assignments),
            participant_slots=tuple(participant_slots),
            finalized=finalized,
        )

    def reconfigure(self, settings: StartListSettings) -> StartListDraft:
        """New settings invalidate every lane and slot."""
        require_transition(self.status, "reconfigure")
        if settings is None:
            raise ValidationError(
                "Start list settings are required", code="settings_required", field="settings"
            )
        return self.model_copy(
            update={"settings": settings, "lane_assignments": (), "participant_slots": ()}
        )

    def assign_lanes(
        self,
        assignments: Iterable[tuple[int, str]],
        available_class_ids: Set[str],
    ) -> StartListDraft:
        require_transition(self.status, "assign_lanes")

        requested = list(assignments or ())
        if not requested:
            raise ValidationError(
                "At least one lane assignment is required",
                code="assignments_required",
                field="assignments",
            )

        lanes: list[LaneAssignment] = []
        for lane_number, entry_class_id in requested:
            if entry_class_id not in available_class_ids:
                raise ValidationError(
                    f"Entry class {entry_class_id!r} is not open for this race",
                    code="unknown_entry_class",
                    field="entry_class_id",
                )
            lanes.append(LaneAssignment.assign(lane_number, entry_class_id, self.settings))

        seen_lanes: set[int] = set()
        for lane in lanes:
            if lane.lane_number in seen_lanes:
                raise ValidationError(
                    f"duplicate lane: lane {lane.lane_number} is assigned more than once",
                    code="duplicate_lane",
                    field="lane_number",
                )
            seen_lanes.add(lane.lane_number)

        if len({lane.entry_class_id for lane in lanes}) != len(lanes):
            raise ValidationError(
                "duplicate class: an entry class can only be assigned to one lane",
                code="duplicate_class",
                field="entry_class_id",
            )

        return self.model_copy(
            update={"lane_assignments": tuple(lanes), "participant_slots": ()}
        )

    def schedule_participants(self, candidates: Iterable[ParticipantCandidate]) -> StartListDraft:
        from orienteering.domain.scheduling import build_participant_slots

        require_transition(self.status, "schedule_participants")

        if not self.lane_assignments:
            raise StateError(
                "Lanes must be assigned before scheduling participants",
                code="lanes_not_assigned",
                field="lane_assignments",
            )

        pending = list(candidates or ())
        if not pending:
            raise ValidationError(
                "There are no participant entries to schedule",
                code="candidates_required",
                field="candidates",
            )

        slots = build_participant_slots(self.settings, self.lane_assignments, pending)
        return self.model_copy(update={"participant_slots": slots})

    def finalize(self) -> StartListDraft:
        require_transition(self.status, "finalize")
        if not self.participant_slots:
            raise StateError(
                "nothing to publish: schedule participants before publishing",
                code="nothing_to_publish",
                field="participant_slots",
            )
        return self.model_copy(update={"finalized": True})
