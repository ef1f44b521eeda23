"""
Start order computation.

Participants are queued per lane in registration order and drawn round-robin
across the assigned lanes, lowest lane first. Lanes without a class never get
a slot, but after each pass that leaves participants waiting the sequence
skips one number per unassigned lane, so that ``sequence // lane_count``
still counts full sweeps of the physical lanes.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

from orienteering.domain.entities import (
    LaneAssignment,
    ParticipantCandidate,
    ParticipantSlot,
    StartListSettings,
)
from orienteering.domain.errors import StateError, ValidationError


def queue_by_lane(
    lane_assignments: Iterable[LaneAssignment],
    candidates: Iterable[ParticipantCandidate],
) -> dict[int, deque[ParticipantCandidate]]:
    """
    Group candidates into one FIFO queue per lane, earliest submission first.

    Candidates submitted at the same instant keep their input order.
    """
    lane_by_class = {a.entry_class_id: a.lane_number for a in lane_assignments}

    grouped: dict[int, list[ParticipantCandidate]] = {}
    for candidate in candidates:
        lane = lane_by_class.get(candidate.entry_class_id)
        if lane is None:
            raise ValidationError(
                f"unassigned class: entry class {candidate.entry_class_id!r} has no lane",
                code="unassigned_class",
                field="entry_class_id",
            )
        grouped.setdefault(lane, []).append(candidate)

    return {
        lane: deque(sorted(queue, key=lambda c: c.submitted_at))
        for lane, queue in grouped.items()
    }


def build_participant_slots(
    settings: StartListSettings,
    lane_assignments: Sequence[LaneAssignment],
    candidates: Iterable[ParticipantCandidate],
) -> tuple[ParticipantSlot, ...]:
    queues = queue_by_lane(lane_assignments, candidates)

    ordered_lanes = sorted(a.lane_number for a in lane_assignments)
    unused_lanes = max(settings.lane_count - len(ordered_lanes), 0)

    slots: list[ParticipantSlot] = []
    sequence = 0
    while any(queues.values()):
        for lane in ordered_lanes:
            queue = queues.get(lane)
            if not queue:
                continue
            candidate = queue.popleft()
            slots.append(
                ParticipantSlot.schedule(
                    participant_entry_id=candidate.participant_entry_id,
                    participant_name=candidate.participant_name,
                    entry_class_id=candidate.entry_class_id,
                    lane_number=lane,
                    sequence=sequence,
                    settings=settings,
                )
            )
            sequence += 1

        if any(queues.values()):
            sequence += unused_lanes

    if not slots:
        raise StateError(
            "scheduling produced no slots",
            code="scheduling_failed",
            field="participant_slots",
        )

    return tuple(slots)
