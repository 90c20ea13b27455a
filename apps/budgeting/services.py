"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Business logic for the budget request lifecycle:
             creation, editing, approval and disbursement. Multi-row
             transitions run in one transaction with row locks.
-------------------------------------------------------------------------
"""
from typing import Dict, Optional

from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from apps.core.exceptions import (
    BudgetExceededException,
    ResourceNotFoundException,
    WorkflowTransitionException,
)
from apps.core.logging import AuditLogger
from apps.budgeting.models import BudgetRequest, RequestStatus, RkabItem
from apps.finance.models import EntryType, LedgerEntry
from apps.users.permissions import check_ownership

CONTENT_FIELDS = ('title', 'description', 'amount_requested', 'needed_by')


def _locked_request(request_id: int) -> BudgetRequest:
    """Re-read a request under a row lock. Call inside a transaction."""
    try:
        return BudgetRequest.objects.select_for_update().get(pk=request_id)
    except BudgetRequest.DoesNotExist:
        raise ResourceNotFoundException("Budget request not found.")


# ---------------------------------------------------------------------------
# Civitas: own requests
# ---------------------------------------------------------------------------

@transaction.atomic
def create_request(user, data: Dict) -> BudgetRequest:
    """
    Create a request owned by user; submitted immediately unless
    ``data['draft']`` is set.
    """
    budget_request = BudgetRequest.objects.create(
        submitted_by=user,
        status=RequestStatus.DRAFT,
        **{field: data.get(field) for field in CONTENT_FIELDS}
    )
    if not data.get('draft'):
        budget_request.submit(user)
        AuditLogger.log_request_submitted(budget_request, user)
    return budget_request


@transaction.atomic
def update_request(request_id: int, user, data: Dict) -> BudgetRequest:
    """
    Edit the content fields of an own DRAFT or SUBMITTED request. The
    status is left unchanged.
    """
    budget_request = _locked_request(request_id)
    check_ownership(budget_request.submitted_by_id, user.pk, action="edit")
    if not budget_request.is_editable:
        raise WorkflowTransitionException(
            f"Cannot edit request. Current status is '{budget_request.get_status_display()}'. "
            "Only draft or submitted requests can be edited."
        )

    for field in CONTENT_FIELDS:
        if field in data:
            setattr(budget_request, field, data[field])
    budget_request.save(update_fields=[*CONTENT_FIELDS, 'updated_at'])
    return budget_request


@transaction.atomic
def delete_request(request_id: int, user) -> None:
    """Remove an own DRAFT request."""
    budget_request = _locked_request(request_id)
    check_ownership(budget_request.submitted_by_id, user.pk, action="delete")
    if budget_request.status != RequestStatus.DRAFT:
        raise WorkflowTransitionException(
            f"Cannot delete request. Current status is '{budget_request.get_status_display()}'. "
            "Only draft requests can be deleted."
        )
    budget_request.delete()


@transaction.atomic
def submit_request(request_id: int, user) -> BudgetRequest:
    budget_request = _locked_request(request_id)
    check_ownership(budget_request.submitted_by_id, user.pk, action="submit")
    budget_request.submit(user)
    AuditLogger.log_request_submitted(budget_request, user)
    return budget_request


@transaction.atomic
def cancel_request(request_id: int, user) -> BudgetRequest:
    budget_request = _locked_request(request_id)
    check_ownership(budget_request.submitted_by_id, user.pk, action="cancel")
    budget_request.cancel()
    return budget_request


def requests_for_owner(user, query: str = '', status: Optional[str] = None) -> QuerySet:
    """Own requests, newest first, optionally searched and filtered."""
    queryset = BudgetRequest.objects.filter(submitted_by=user)
    if status:
        queryset = queryset.filter(status=status)
    query = (query or '').strip()
    if query:
        queryset = queryset.filter(Q(title__icontains=query) | Q(description__icontains=query))
    return queryset.order_by('-created_at', '-id')


def eligible_for_proof(user) -> QuerySet:
    """Own DISBURSED requests, the ones still waiting for proof first."""
    return BudgetRequest.objects.filter(
        submitted_by=user, status=RequestStatus.DISBURSED
    ).prefetch_related('proofs').order_by('disbursed_at', 'id')


# ---------------------------------------------------------------------------
# Kepsek: approvals
# ---------------------------------------------------------------------------

def pending_requests(query: str = '') -> QuerySet:
    queryset = BudgetRequest.objects.filter(
        status=RequestStatus.SUBMITTED
    ).select_related('submitted_by')
    query = (query or '').strip()
    if query:
        queryset = queryset.filter(
            Q(title__icontains=query) | Q(submitted_by__name__icontains=query)
        )
    return queryset.order_by('submitted_at', 'id')


@transaction.atomic
def decide_request(request_id: int, user, approve: bool, note: Optional[str] = None) -> BudgetRequest:
    """
    Approve or reject a SUBMITTED request.

    Raises:
        WorkflowTransitionException: If the request was already decided.
    """
    budget_request = _locked_request(request_id)
    budget_request.decide(user, approve, note)
    AuditLogger.log_request_decided(budget_request, user)
    return budget_request


# ---------------------------------------------------------------------------
# Bendahara: disbursement
# ---------------------------------------------------------------------------

def disbursement_queue(tab: str = 'ready') -> QuerySet:
    """
    ``ready``: APPROVED requests waiting for payment, oldest decision first.
    ``done``: DISBURSED and COMPLETED requests, latest payment first.
    """
    queryset = BudgetRequest.objects.select_related('submitted_by', 'rkab_item')
    if tab == 'done':
        return queryset.filter(
            status__in=[RequestStatus.DISBURSED, RequestStatus.COMPLETED]
        ).order_by('-disbursed_at', '-id')
    return queryset.filter(status=RequestStatus.APPROVED).order_by('approved_at', 'id')


@transaction.atomic
def disburse_request(request_id: int, user) -> LedgerEntry:
    """
    Pay out an APPROVED request.

    Flips the request to DISBURSED, appends an EXPENSE ledger entry for the
    requested amount and, when the request sits in an RKAS, adds the amount
    to the item's used amount. All or nothing.

    Raises:
        WorkflowTransitionException: If the request is not APPROVED
            (including a second disbursement attempt).
        BudgetExceededException: If the RKAS item has too little left.
            Checked before anything is written.
    """
    budget_request = _locked_request(request_id)
    if budget_request.status != RequestStatus.APPROVED:
        raise WorkflowTransitionException(
            f"Cannot disburse request. Current status is '{budget_request.get_status_display()}'. "
            "Only approved requests can be disbursed."
        )

    rkab_item = RkabItem.objects.select_for_update().filter(budget_request=budget_request).first()
    amount = budget_request.amount_requested
    if rkab_item is not None and rkab_item.used_amount + amount > rkab_item.amount_allocated:
        raise BudgetExceededException(
            f"Disbursing Rp {amount} would exceed the RKAS allocation. "
            f"Remaining: Rp {rkab_item.remaining}.",
            details={
                'allocated': rkab_item.amount_allocated,
                'used': rkab_item.used_amount,
                'requested': amount,
            }
        )

    budget_request.mark_disbursed(user)
    entry = LedgerEntry.objects.create(
        entry_type=EntryType.EXPENSE,
        amount=amount,
        date=timezone.localdate(),
        description=f"Pencairan: {budget_request.title}"[:200],
        budget_request=budget_request,
        rkab_item=rkab_item,
        recorded_by=user,
    )
    if rkab_item is not None:
        rkab_item.used_amount += amount
        rkab_item.save(update_fields=['used_amount'])

    AuditLogger.log_request_disbursed(budget_request, entry, user)
    return entry


@transaction.atomic
def validate_completion(request_id: int, user) -> BudgetRequest:
    """
    Bendahara confirms a DISBURSED request as COMPLETED after checking its
    proofs.

    Raises:
        WorkflowTransitionException: If not DISBURSED or no proof exists.
    """
    budget_request = _locked_request(request_id)
    budget_request.complete()
    AuditLogger.log_request_completed(budget_request, user)
    return budget_request
