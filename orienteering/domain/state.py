from typing import Literal

from orienteering.domain.errors import StateError

StartListStatus = Literal["DRAFT", "PUBLISHED"]
StartListAction = Literal["reconfigure", "assign_lanes", "schedule_participants", "finalize"]


def status_of(finalized: bool) -> StartListStatus:
    return "PUBLISHED" if finalized else "DRAFT"


def can_transition(current: StartListStatus, action: StartListAction) -> bool:
    """
    Determine if a start-list action is allowed in the current status.
    PUBLISHED is terminal: there is no unpublish.
    """
    if current == "PUBLISHED":
        return False

    return action in ("reconfigure", "assign_lanes", "schedule_participants", "finalize")


def require_transition(current: StartListStatus, action: StartListAction) -> None:
    """Raise StateError if ``action`` is not allowed from ``current``."""
    if not can_transition(current, action):
        raise StateError(
            f"Cannot {action.replace('_', ' ')}: start list is already published",
            code="already_published",
            field="status",
        )
