"""
Start list component - Data models.

Frozen dataclass inputs and outputs for the start-list use cases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from orienteering.domain.entities import StartListDraft

# --- Validation Errors ---


@dataclass(frozen=True)
class StartListErrorDetail:
    """Start list operation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ConfigureStartListInput:
    """Input for creating or resetting a start list's settings."""

    event_id: str
    race_id: str
    start_at: datetime | str
    interval_seconds: int
    lane_count: int


@dataclass(frozen=True)
class LaneClassInput:
    """One lane-to-class pairing."""

    lane_number: int
    entry_class_id: str


@dataclass(frozen=True)
class AssignLanesInput:
    """Input for assigning entry classes to lanes."""

    event_id: str
    race_id: str
    assignments: tuple[LaneClassInput, ...]


@dataclass(frozen=True)
class ScheduleParticipantsInput:
    """Input for computing the start order from registered entries."""

    event_id: str
    race_id: str


@dataclass(frozen=True)
class FinalizeStartListInput:
    """Input for publishing a start list."""

    event_id: str
    race_id: str


@dataclass(frozen=True)
class GetStartListInput:
    """Input for reading a start list."""

    event_id: str
    race_id: str


# --- Output Models ---


@dataclass(frozen=True)
class StartListOutput:
    """Output from any start list operation."""

    draft: StartListDraft | None
    errors: tuple[StartListErrorDetail, ...] = field(default_factory=tuple)
    success: bool = True
    not_found: bool = False
