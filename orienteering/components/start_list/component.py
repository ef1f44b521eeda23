"""
Start list component - Start list lifecycle for one race.

Converts domain errors raised by StartListService into component outputs.

Shell Layer - handles I/O and error conversion.

Invariants:
- A published start list is never modified again
- Assigning lanes always clears previously scheduled participants
- Start time = start_at + (sequence // lane_count) * interval_seconds
"""

from __future__ import annotations

from collections.abc import Callable

from orienteering.domain.entities import StartListDraft
from orienteering.domain.errors import DomainError, NotFoundError

from ._impl import StartListService, log_rejection
from .models import (
    AssignLanesInput,
    ConfigureStartListInput,
    FinalizeStartListInput,
    GetStartListInput,
    ScheduleParticipantsInput,
    StartListErrorDetail,
    StartListOutput,
)

StartListInput = (
    ConfigureStartListInput
    | AssignLanesInput
    | ScheduleParticipantsInput
    | FinalizeStartListInput
    | GetStartListInput
)


def _execute(
    inp: StartListInput,
    operation: Callable[[], StartListDraft],
) -> StartListOutput:
    try:
        draft = operation()
    except DomainError as e:
        log_rejection(e, inp.event_id, inp.race_id)
        return StartListOutput(
            draft=None,
            errors=(StartListErrorDetail(code=e.code, message=e.message, field=e.field),),
            success=False,
            not_found=isinstance(e, NotFoundError),
        )
    return StartListOutput(draft=draft)


# --- Component Entry Points ---


def run_configure(inp: ConfigureStartListInput, service: StartListService) -> StartListOutput:
    """
    Configure a start list, creating it or resetting its lanes and slots.

    Args:
        inp: Race identity and the new settings.
        service: Start list service.

    Returns:
        StartListOutput with the saved draft or errors.
    """
    return _execute(
        inp,
        lambda: service.configure(
            inp.event_id, inp.race_id, inp.start_at, inp.interval_seconds, inp.lane_count
        ),
    )


def run_assign_lanes(inp: AssignLanesInput, service: StartListService) -> StartListOutput:
    """Assign entry classes to lanes; clears any scheduled participants."""
    return _execute(inp, lambda: service.assign_lanes(inp.event_id, inp.race_id, inp.assignments))


def run_schedule_participants(
    inp: ScheduleParticipantsInput, service: StartListService
) -> StartListOutput:
    """Compute lane, order and start time for every registered participant."""
    return _execute(inp, lambda: service.schedule_participants(inp.event_id, inp.race_id))


def run_finalize(inp: FinalizeStartListInput, service: StartListService) -> StartListOutput:
    """Publish the start list."""
    return _execute(inp, lambda: service.finalize(inp.event_id, inp.race_id))


def run_get(inp: GetStartListInput, service: StartListService) -> StartListOutput:
    return _execute(inp, lambda: service.get(inp.event_id, inp.race_id))


def run(inp: StartListInput, service: StartListService) -> StartListOutput:
    """
    Main entry point for the start list component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ConfigureStartListInput):
        return run_configure(inp, service)
    elif isinstance(inp, AssignLanesInput):
        return run_assign_lanes(inp, service)
    elif isinstance(inp, ScheduleParticipantsInput):
        return run_schedule_participants(inp, service)
    elif isinstance(inp, FinalizeStartListInput):
        return run_finalize(inp, service)
    elif isinstance(inp, GetStartListInput):
        return run_get(inp, service)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
