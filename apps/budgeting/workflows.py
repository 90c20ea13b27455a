"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Workflow state machines for budget requests and RKAS plans.
             Every status change is checked against these tables.
-------------------------------------------------------------------------
"""
from typing import List

from apps.core.exceptions import WorkflowTransitionException
from apps.budgeting.models import BudgetRequest, RequestStatus, Rkab, RkabStatus


# Define valid state transitions
REQUEST_TRANSITIONS = {
    RequestStatus.DRAFT: [RequestStatus.SUBMITTED, RequestStatus.CANCELLED],
    RequestStatus.SUBMITTED: [RequestStatus.APPROVED, RequestStatus.REJECTED, RequestStatus.CANCELLED],
    RequestStatus.APPROVED: [RequestStatus.DISBURSED],
    RequestStatus.DISBURSED: [RequestStatus.COMPLETED],
    RequestStatus.REJECTED: [],
    RequestStatus.COMPLETED: [],
    RequestStatus.CANCELLED: [],
}

RKAB_TRANSITIONS = {
    RkabStatus.DRAFT: [RkabStatus.SUBMITTED],
    RkabStatus.SUBMITTED: [RkabStatus.APPROVED, RkabStatus.REJECTED],
    RkabStatus.APPROVED: [],
    RkabStatus.REJECTED: [],
}

# Statuses a request must be in for the given action
REQUIRED_STATUS = {
    RequestStatus.SUBMITTED: "Only draft requests can be submitted.",
    RequestStatus.APPROVED: "Only submitted requests can be approved.",
    RequestStatus.REJECTED: "Only submitted requests can be rejected.",
    RequestStatus.DISBURSED: "Only approved requests can be disbursed.",
    RequestStatus.COMPLETED: "Only disbursed requests can be completed.",
    RequestStatus.CANCELLED: "Only draft or submitted requests can be cancelled.",
}


def get_valid_transitions(current_status: str) -> List[str]:
    """Valid next states for a budget request."""
    return REQUEST_TRANSITIONS.get(current_status, [])


def can_transition(current_status: str, target_status: str) -> bool:
    return target_status in get_valid_transitions(current_status)


def can_transition_rkab(current_status: str, target_status: str) -> bool:
    return target_status in RKAB_TRANSITIONS.get(current_status, [])


def ensure_request_transition(budget_request: BudgetRequest, target_status: str) -> None:
    """
    Raises:
        WorkflowTransitionException: If the table has no edge from the
            request's current status to target_status.
    """
    if can_transition(budget_request.status, target_status):
        return
    raise WorkflowTransitionException(
        f"Cannot move request to '{RequestStatus(target_status).label}'. "
        f"Current status is '{budget_request.get_status_display()}'. "
        f"{REQUIRED_STATUS.get(target_status, '')}".strip(),
        details={'status': budget_request.status, 'target': target_status}
    )


def ensure_rkab_transition(rkab: Rkab, target_status: str) -> None:
    """
    Raises:
        WorkflowTransitionException: If the RKAS cannot move to target_status.
    """
    if can_transition_rkab(rkab.status, target_status):
        return
    raise WorkflowTransitionException(
        f"Cannot move RKAS {rkab.code} to '{RkabStatus(target_status).label}'. "
        f"Current status is '{rkab.get_status_display()}'.",
        details={'status': rkab.status, 'target': target_status}
    )


def build_timeline(budget_request: BudgetRequest) -> List[dict]:
    """
    Ordered list of lifecycle events that have happened to a request.

    Returns:
        List of {'status', 'label', 'at', 'by'} dicts, oldest first.
    """
    events = [
        (RequestStatus.DRAFT, budget_request.created_at, budget_request.submitted_by),
    ]
    if budget_request.submitted_at:
        events.append((RequestStatus.SUBMITTED, budget_request.submitted_at, budget_request.submitted_by))
    if budget_request.approved_at:
        decided = (RequestStatus.REJECTED if budget_request.status == RequestStatus.REJECTED
                   else RequestStatus.APPROVED)
        events.append((decided, budget_request.approved_at, budget_request.approved_by))
    if budget_request.disbursed_at:
        events.append((RequestStatus.DISBURSED, budget_request.disbursed_at, budget_request.disbursed_by))
    if budget_request.completed_at:
        events.append((RequestStatus.COMPLETED, budget_request.completed_at, None))
    if budget_request.status == RequestStatus.CANCELLED:
        events.append((RequestStatus.CANCELLED, budget_request.updated_at, budget_request.submitted_by))

    return [
        {
            'status': status,
            'label': RequestStatus(status).label,
            'at': at.isoformat() if at else None,
            'by': user.name if user else None,
        }
        for status, at, user in events
    ]
