"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Business logic for RKAS (annual school budget plan):
             creation, item allocation, submission, decision and
             utilization (realisasi).
-------------------------------------------------------------------------
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from django.db import transaction
from django.db.models import Count, QuerySet, Sum
from django.db.models.functions import Coalesce

from apps.core.exceptions import (
    ResourceNotFoundException,
    ValidationFailedException,
    WorkflowTransitionException,
)
from apps.core.logging import AuditLogger
from apps.budgeting.models import BudgetRequest, RequestStatus, Rkab, RkabItem, RkabStatus


def _locked_rkab(rkab_id: int) -> Rkab:
    try:
        return Rkab.objects.select_for_update().get(pk=rkab_id)
    except Rkab.DoesNotExist:
        raise ResourceNotFoundException("RKAS not found.")


def generate_rkab_code(fiscal_year: int) -> str:
    """
    Next RKAS code for a fiscal year.

    Format: RKAS-YYYY-XXXX where XXXX is the count of existing plans for
    the year plus one. Two concurrent creators can compute the same code;
    the unique constraint on ``Rkab.code`` rejects the second insert.
    """
    count = Rkab.objects.filter(fiscal_year=fiscal_year).count()
    return f"RKAS-{fiscal_year}-{count + 1:04d}"


@transaction.atomic
def create_rkab(user, fiscal_year: int) -> Rkab:
    rkab = Rkab.objects.create(
        code=generate_rkab_code(fiscal_year),
        fiscal_year=fiscal_year,
        status=RkabStatus.DRAFT,
        created_by=user,
    )
    AuditLogger.log_rkab_event(rkab, 'created', user)
    return rkab


def allocation_candidates(limit: int = 50) -> QuerySet:
    """APPROVED requests that are not yet part of any RKAS."""
    return BudgetRequest.objects.filter(
        status=RequestStatus.APPROVED, rkab_item__isnull=True
    ).select_related('submitted_by').order_by('-approved_at', '-id')[:limit]


def _batch_errors(items: List[Dict]) -> Dict[str, List[str]]:
    """Per-line problems with a batch, keyed ``items[<index>]``."""
    errors = {}
    request_ids = [item['budget_request_id'] for item in items]
    requests = BudgetRequest.objects.in_bulk(request_ids)
    allocated = set(
        RkabItem.objects.filter(budget_request_id__in=request_ids).values_list('budget_request_id', flat=True)
    )
    seen = set()

    for index, item in enumerate(items):
        request_id = item['budget_request_id']
        budget_request = requests.get(request_id)
        problems = []
        if budget_request is None:
            problems.append(f"Budget request #{request_id} not found.")
        else:
            if budget_request.status != RequestStatus.APPROVED:
                problems.append(f"Budget request #{request_id} is not approved.")
            if request_id in allocated:
                problems.append(f"Budget request #{request_id} is already in an RKAS.")
            if item['amount_allocated'] < budget_request.amount_requested:
                problems.append(
                    f"Allocation must be at least the requested amount "
                    f"(Rp {budget_request.amount_requested})."
                )
        if request_id in seen:
            problems.append(f"Budget request #{request_id} appears more than once.")
        seen.add(request_id)

        if problems:
            errors[f'items[{index}]'] = problems
    return errors


@transaction.atomic
def add_rkab_items(rkab_id: int, user, items: List[Dict]) -> List[RkabItem]:
    """
    Allocate a batch of approved requests into a DRAFT RKAS.

    The whole batch is validated before anything is written.

    Raises:
        ValidationFailedException: If any line is invalid (nothing is written).
        WorkflowTransitionException: If the RKAS is no longer a draft.
    """
    rkab = _locked_rkab(rkab_id)
    if rkab.status != RkabStatus.DRAFT:
        raise WorkflowTransitionException(
            f"Cannot add items to RKAS {rkab.code}. Current status is "
            f"'{rkab.get_status_display()}'. Only draft plans can be changed."
        )
    if not items:
        raise ValidationFailedException(details={'items': ["Add at least one item."]})

    errors = _batch_errors(items)
    if errors:
        raise ValidationFailedException("Some RKAS items are invalid.", details=errors)

    created = RkabItem.objects.bulk_create([
        RkabItem(
            rkab=rkab,
            budget_request_id=item['budget_request_id'],
            amount_allocated=item['amount_allocated'],
            note=item.get('note'),
        )
        for item in items
    ])
    AuditLogger.log_rkab_event(rkab, f'{len(created)} items added', user)
    return created


@transaction.atomic
def submit_rkab(rkab_id: int, user) -> Rkab:
    rkab = _locked_rkab(rkab_id)
    rkab.submit(user)
    AuditLogger.log_rkab_event(rkab, 'submitted', user)
    return rkab


@transaction.atomic
def decide_rkab(rkab_id: int, user, approve: bool, note: Optional[str] = None) -> Rkab:
    rkab = _locked_rkab(rkab_id)
    rkab.decide(user, approve, note)
    AuditLogger.log_rkab_event(rkab, 'approved' if approve else 'rejected', user)
    return rkab


def rkab_totals(rkab: Rkab) -> Dict[str, int]:
    totals = rkab.items.aggregate(
        allocated=Coalesce(Sum('amount_allocated'), 0),
        used=Coalesce(Sum('used_amount'), 0),
    )
    return {
        'total_allocated': totals['allocated'],
        'total_used': totals['used'],
        'remaining': totals['allocated'] - totals['used'],
    }


def realisasi_percent(fiscal_year: int) -> int:
    """
    Utilization of approved RKAS budget for a year, as a whole percentage.

    Returns:
        used / allocated * 100 rounded half up; 0 when nothing is allocated.
    """
    totals = RkabItem.objects.filter(
        rkab__fiscal_year=fiscal_year, rkab__status=RkabStatus.APPROVED
    ).aggregate(
        allocated=Coalesce(Sum('amount_allocated'), 0),
        used=Coalesce(Sum('used_amount'), 0),
    )
    if not totals['allocated']:
        return 0
    percent = Decimal(totals['used']) * 100 / Decimal(totals['allocated'])
    return int(percent.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def rkab_list(status: Optional[str] = None) -> QuerySet:
    """Plans with their item count and total allocation annotated."""
    queryset = Rkab.objects.select_related('created_by').annotate(
        item_count=Count('items'),
        total_allocated=Coalesce(Sum('items__amount_allocated'), 0),
    )
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by('-created_at', '-id')
