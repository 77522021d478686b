"""Allowed status moves for free-session, reschedule and extra-session requests."""

from typing import Dict, FrozenSet

from libs.common.errors import ConflictError, ErrorCode
from services.requests_service.models import RequestStatus

FREE_SESSION_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset(
        {RequestStatus.SELECTED, RequestStatus.NOT_SELECTED}
    ),
    RequestStatus.SELECTED: frozenset({RequestStatus.COMPLETED}),
}

DECISION_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.DENIED}),
}

TRANSITIONS = {
    "FreeSessionRequest": FREE_SESSION_TRANSITIONS,
    "RescheduleRequest": DECISION_TRANSITIONS,
    "ExtraSessionRequest": DECISION_TRANSITIONS,
}


def can_transition(entity_type: str, current: RequestStatus, target: RequestStatus) -> bool:
    allowed = TRANSITIONS[entity_type].get(current, frozenset())
    return target in allowed


def ensure_transition(
    entity_type: str, current: RequestStatus, target: RequestStatus
) -> None:
    """Raise 409 when a request cannot move from its current status to target."""
    if not can_transition(entity_type, current, target):
        raise ConflictError(
            f"Cannot move {entity_type} from {current.value} to {target.value}",
            ErrorCode.INVALID_STATUS_TRANSITION,
        )
