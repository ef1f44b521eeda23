"""
Start list component - Lane assignment and start order for a race.
"""

from ._impl import StartListService, parse_start_at
from .component import (
    run,
    run_assign_lanes,
    run_configure,
    run_finalize,
    run_get,
    run_schedule_participants,
)
from .models import (
    AssignLanesInput,
    ConfigureStartListInput,
    FinalizeStartListInput,
    GetStartListInput,
    LaneClassInput,
    ScheduleParticipantsInput,
    StartListErrorDetail,
    StartListOutput,
)
from .ports import EntryClassQueryPort, ParticipantEntryQueryPort, StartListRepoPort

__all__ = [
    # Entry points
    "run",
    "run_configure",
    "run_assign_lanes",
    "run_schedule_participants",
    "run_finalize",
    "run_get",
    # Input models
    "ConfigureStartListInput",
    "AssignLanesInput",
    "LaneClassInput",
    "ScheduleParticipantsInput",
    "FinalizeStartListInput",
    "GetStartListInput",
    # Output models
    "StartListOutput",
    "StartListErrorDetail",
    # Ports
    "StartListRepoPort",
    "EntryClassQueryPort",
    "ParticipantEntryQueryPort",
    # Service
    "StartListService",
    "parse_start_at",
]
