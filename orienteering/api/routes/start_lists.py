"""
Start List API Routes.

Organizer endpoints for building a race's start list: settings, lane
assignment, participant scheduling and publication.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from orienteering.api.deps import get_start_list_service
from orienteering.components.start_list import (
    AssignLanesInput,
    ConfigureStartListInput,
    FinalizeStartListInput,
    GetStartListInput,
    LaneClassInput,
    ScheduleParticipantsInput,
    StartListOutput,
    StartListService,
    run_assign_lanes,
    run_configure,
    run_finalize,
    run_get,
    run_schedule_participants,
)
from orienteering.domain.entities import StartListDraft
from orienteering.domain.state import StartListStatus

router = APIRouter()


# --- Request/Response Models ---


class ConfigureStartListRequest(BaseModel):
    """Request to configure a start list."""

    start_at: datetime = Field(..., description="First wave start time (ISO-8601)")
    interval_seconds: int = Field(..., gt=0, description="Seconds between waves")
    lane_count: int = Field(..., ge=1, description="Number of physical start lanes")


class LaneAssignmentRequest(BaseModel):
    lane_number: int = Field(..., ge=1)
    entry_class_id: str = Field(..., min_length=1)


class AssignLanesRequest(BaseModel):
    """Request to assign entry classes to lanes."""

    assignments: list[LaneAssignmentRequest] = Field(..., min_length=1)


class StartListSettingsResponse(BaseModel):
    start_at: datetime
    interval_seconds: int
    lane_count: int


class LaneAssignmentResponse(BaseModel):
    lane_number: int
    entry_class_id: str


class ParticipantSlotResponse(BaseModel):
    lane_number: int
    entry_class_id: str
    participant_entry_id: str
    participant_name: str
    start_time: datetime
    sequence: int


class StartListDraftResponse(BaseModel):
    """Start list response; lanes by lane number, participants in start order."""

    event_id: str
    race_id: str
    status: StartListStatus
    settings: StartListSettingsResponse
    lanes: list[LaneAssignmentResponse]
    participants: list[ParticipantSlotResponse]


# --- Helpers ---


def draft_to_response(draft: StartListDraft) -> StartListDraftResponse:
    """Convert StartListDraft to response model."""
    settings = draft.settings
    return StartListDraftResponse(
        event_id=draft.event_id,
        race_id=draft.race_id,
        status=draft.status,
        settings=StartListSettingsResponse(
            start_at=settings.start_at,
            interval_seconds=settings.interval_seconds,
            lane_count=settings.lane_count,
        ),
        lanes=[
            LaneAssignmentResponse(lane_number=a.lane_number, entry_class_id=a.entry_class_id)
            for a in sorted(draft.lane_assignments, key=lambda a: a.lane_number)
        ],
        participants=[
            ParticipantSlotResponse(
                lane_number=s.lane_number,
                entry_class_id=s.entry_class_id,
                participant_entry_id=s.participant_entry_id,
                participant_name=s.participant_name,
                start_time=s.start_time,
                sequence=s.sequence,
            )
            for s in sorted(draft.participant_slots, key=lambda s: s.sequence)
        ],
    )


def _serialize_errors(output: StartListOutput) -> list[dict[str, Any]]:
    """Serialize errors for JSON response."""
    return [{"code": e.code, "message": e.message, "field": e.field} for e in output.errors]


def _respond(output: StartListOutput) -> StartListDraftResponse:
    if output.not_found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"errors": _serialize_errors(output)},
        )
    if not output.success or output.draft is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": _serialize_errors(output)},
        )
    return draft_to_response(output.draft)


# --- Endpoints ---


@router.get("/events/{event_id}/start-lists/{race_id}/draft", response_model=StartListDraftResponse)
def get_start_list_draft(
    event_id: str,
    race_id: str,
    service: StartListService = Depends(get_start_list_service),
) -> StartListDraftResponse:
    """Get the current start list for a race."""
    return _respond(run_get(GetStartListInput(event_id=event_id, race_id=race_id), service))


@router.post(
    "/events/{event_id}/start-lists/{race_id}/settings",
    response_model=StartListDraftResponse,
    status_code=status.HTTP_201_CREATED,
)
def configure_start_list(
    event_id: str,
    race_id: str,
    request: ConfigureStartListRequest,
    service: StartListService = Depends(get_start_list_service),
) -> StartListDraftResponse:
    """Create the start list or reset it with new settings."""
    inp = ConfigureStartListInput(
        event_id=event_id,
        race_id=race_id,
        start_at=request.start_at,
        interval_seconds=request.interval_seconds,
        lane_count=request.lane_count,
    )
    return _respond(run_configure(inp, service))


@router.put("/events/{event_id}/start-lists/{race_id}/lanes", response_model=StartListDraftResponse)
def assign_lanes(
    event_id: str,
    race_id: str,
    request: AssignLanesRequest,
    service: StartListService = Depends(get_start_list_service),
) -> StartListDraftResponse:
    """Assign entry classes to lanes. Clears any scheduled participants."""
    inp = AssignLanesInput(
        event_id=event_id,
        race_id=race_id,
        assignments=tuple(
            LaneClassInput(lane_number=a.lane_number, entry_class_id=a.entry_class_id)
            for a in request.assignments
        ),
    )
    return _respond(run_assign_lanes(inp, service))


@router.put(
    "/events/{event_id}/start-lists/{race_id}/participants",
    response_model=StartListDraftResponse,
)
def schedule_participants(
    event_id: str,
    race_id: str,
    service: StartListService = Depends(get_start_list_service),
) -> StartListDraftResponse:
    """Place every registered participant on a lane with a start time."""
    inp = ScheduleParticipantsInput(event_id=event_id, race_id=race_id)
    return _respond(run_schedule_participants(inp, service))


@router.post(
    "/events/{event_id}/start-lists/{race_id}/finalize",
    response_model=StartListDraftResponse,
)
def finalize_start_list(
    event_id: str,
    race_id: str,
    service: StartListService = Depends(get_start_list_service),
) -> StartListDraftResponse:
    """Publish the start list. Published start lists cannot be changed."""
    inp = FinalizeStartListInput(event_id=event_id, race_id=race_id)
    return _respond(run_finalize(inp, service))
