"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Business logic for funding sources and the cash ledger.
             All balances and totals are computed from LedgerEntry rows.
-------------------------------------------------------------------------
"""
import logging
import re
from datetime import date
from typing import Dict, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.db import transaction
from django.db.models import Q, QuerySet, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.core.exceptions import ValidationFailedException
from apps.finance.models import EntryType, FundingSource, LedgerEntry

logger = logging.getLogger(__name__)

PERIOD_RE = re.compile(r'^(\d{4})-(0[1-9]|1[0-2])$')


# ---------------------------------------------------------------------------
# Funding sources
# ---------------------------------------------------------------------------

def normalize_name(name: str) -> str:
    """Trim and collapse internal whitespace."""
    return ' '.join((name or '').split())


def find_or_create_funding_source(name: str, agency: Optional[str] = None) -> Tuple[FundingSource, bool]:
    """
    Return the funding source matching name (ignoring case), creating it
    when absent.

    Returns:
        (source, created) where created is False for an existing match.
    """
    name = normalize_name(name)
    agency = normalize_name(agency) or None

    existing = FundingSource.objects.filter(name__iexact=name).first()
    if existing:
        return existing, False

    source = FundingSource.objects.create(name=name, agency=agency)
    logger.info(f"Funding source created: {source.name} (#{source.pk})")
    return source, True


def search_funding_sources(query: str = '') -> QuerySet:
    """Name search; empty query lists every source."""
    queryset = FundingSource.objects.order_by('name')
    query = normalize_name(query)
    if query:
        return queryset.filter(name__icontains=query)[:20]
    return queryset[:200]


# ---------------------------------------------------------------------------
# Periods
# ---------------------------------------------------------------------------

def current_period() -> str:
    today = timezone.localdate()
    return f"{today.year:04d}-{today.month:02d}"


def parse_period(period: str) -> Tuple[date, date]:
    """
    Convert 'YYYY-MM' into a half-open [start, end) date range.

    Raises:
        ValidationFailedException: If the period is malformed.
    """
    match = PERIOD_RE.match(period or '')
    if not match:
        raise ValidationFailedException(
            "Period must use the YYYY-MM format.",
            details={'period': ["Period must use the YYYY-MM format."]}
        )
    start = date(int(match.group(1)), int(match.group(2)), 1)
    return start, start + relativedelta(months=1)


def rolling_window(today: Optional[date] = None) -> Tuple[date, date]:
    """Inclusive range covering the last twelve months up to today."""
    today = today or timezone.localdate()
    return today - relativedelta(months=12), today


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

def sum_amount(queryset: QuerySet) -> int:
    return queryset.aggregate(total=Coalesce(Sum('amount'), 0))['total']


def totals_for(queryset: QuerySet) -> Dict[str, int]:
    """Income, expense and their difference over a set of entries."""
    income = sum_amount(queryset.filter(entry_type=EntryType.INCOME))
    expense = sum_amount(queryset.filter(entry_type=EntryType.EXPENSE))
    return {'income': income, 'expense': expense, 'balance': income - expense}


def all_time_balance() -> Dict[str, int]:
    return totals_for(LedgerEntry.objects.all())


def period_summary(period: str) -> Dict[str, int]:
    start, end = parse_period(period)
    return totals_for(LedgerEntry.objects.filter(date__gte=start, date__lt=end))


def rolling_totals(today: Optional[date] = None) -> Dict[str, int]:
    start, end = rolling_window(today)
    return totals_for(LedgerEntry.objects.filter(date__gte=start, date__lte=end))


def monthly_series(months: int = 6, today: Optional[date] = None):
    """
    Income and expense per calendar month, oldest first, ending with the
    current month.
    """
    today = today or timezone.localdate()
    first = date(today.year, today.month, 1)
    series = []
    for offset in range(months - 1, -1, -1):
        start = first - relativedelta(months=offset)
        period = f"{start.year:04d}-{start.month:02d}"
        series.append({'period': period, **period_summary(period)})
    return series


# ---------------------------------------------------------------------------
# Listing and search
# ---------------------------------------------------------------------------

def filter_entries(period: Optional[str] = None, entry_type: Optional[str] = None,
                   query: Optional[str] = None) -> QuerySet:
    """
    Entries in a month, optionally narrowed by type and a free-text query.

    The query matches the description, the funding source name and the
    title of the request behind an expense.
    """
    queryset = LedgerEntry.objects.select_related(
        'funding_source', 'budget_request', 'rkab_item__budget_request', 'recorded_by'
    )
    if period:
        start, end = parse_period(period)
        queryset = queryset.filter(date__gte=start, date__lt=end)
    if entry_type:
        queryset = queryset.filter(entry_type=entry_type)
    query = normalize_name(query)
    if query:
        queryset = queryset.filter(
            Q(description__icontains=query)
            | Q(funding_source__name__icontains=query)
            | Q(budget_request__title__icontains=query)
            | Q(rkab_item__budget_request__title__icontains=query)
        )
    return queryset.order_by('-date', '-id')


def after_cursor(queryset: QuerySet, cursor: Optional[int]) -> QuerySet:
    """
    Keyset pagination over (-date, -id): rows strictly after the cursor
    entry. An unknown cursor yields an empty page.
    """
    if not cursor:
        return queryset
    anchor = LedgerEntry.objects.filter(pk=cursor).values('date', 'id').first()
    if anchor is None:
        return queryset.none()
    return queryset.filter(
        Q(date__lt=anchor['date']) | Q(date=anchor['date'], id__lt=anchor['id'])
    )


def _page(filtered: QuerySet, cursor: Optional[int], take: int) -> Tuple[list, Optional[int]]:
    """Keyset page of a filtered listing and the cursor for the next one."""
    page = list(after_cursor(filtered, cursor)[:take + 1])
    has_more = len(page) > take
    page = page[:take]
    return page, page[-1].pk if has_more else None


def list_entries(period: Optional[str] = None, entry_type: Optional[str] = None,
                 query: Optional[str] = None, cursor: Optional[int] = None,
                 take: int = 20) -> Dict:
    """
    One page of ledger entries plus totals for the whole filtered set.

    Returns:
        Dict with items, next_cursor (None on the last page) and totals.
    """
    filtered = filter_entries(period, entry_type, query)
    items, next_cursor = _page(filtered, cursor, take)
    return {
        'items': items,
        'next_cursor': next_cursor,
        'totals': totals_for(filtered.order_by()),
    }


def list_transactions(entry_type: Optional[str] = None, query: Optional[str] = None,
                      cursor: Optional[int] = None, take: int = 20,
                      today: Optional[date] = None) -> Dict:
    """
    Income and expense history over the rolling twelve months.

    The type and query narrow the items only; the totals always cover
    every entry in the window.
    """
    start, end = rolling_window(today)
    filtered = filter_entries(entry_type=entry_type, query=query).filter(
        date__gte=start, date__lte=end
    )
    items, next_cursor = _page(filtered, cursor, take)
    return {
        'items': items,
        'next_cursor': next_cursor,
        'totals': rolling_totals(today),
        'window': {'start': start, 'end': end},
    }


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

@transaction.atomic
def record_entry(user, entry_type: str, amount: int, entry_date: date,
                 description: Optional[str] = None,
                 funding_source_id: Optional[int] = None,
                 rkab_item_id: Optional[int] = None) -> LedgerEntry:
    """
    Append a manual ledger entry.

    Raises:
        ValidationFailedException: If a referenced funding source or RKAS
            item does not exist.
    """
    from apps.budgeting.models import RkabItem

    if funding_source_id and not FundingSource.objects.filter(pk=funding_source_id).exists():
        raise ValidationFailedException(
            "Funding source not found.",
            details={'funding_source_id': ["Funding source not found."]}
        )
    if rkab_item_id and not RkabItem.objects.filter(pk=rkab_item_id).exists():
        raise ValidationFailedException(
            "RKAS item not found.",
            details={'rkab_item_id': ["RKAS item not found."]}
        )

    entry = LedgerEntry.objects.create(
        entry_type=entry_type,
        amount=amount,
        date=entry_date,
        description=normalize_name(description) or None,
        funding_source_id=funding_source_id or None,
        rkab_item_id=rkab_item_id or None,
        recorded_by=user,
    )
    logger.info(
        f"Ledger entry #{entry.pk} recorded: {entry.entry_type} Rp {entry.amount} "
        f"on {entry.date} by {user.email}"
    )
    return entry


def record_income(user, amount: int, entry_date: date, description: Optional[str] = None,
                  funding_source_id: Optional[int] = None) -> LedgerEntry:
    return record_entry(
        user, EntryType.INCOME, amount, entry_date,
        description=description, funding_source_id=funding_source_id
    )


def recent_income(limit: int = 50, today: Optional[date] = None) -> Dict:
    """Latest income entries within the rolling twelve months plus their sum."""
    start, end = rolling_window(today)
    queryset = LedgerEntry.objects.filter(
        entry_type=EntryType.INCOME, date__gte=start, date__lte=end
    ).select_related('funding_source', 'recorded_by')
    return {
        'items': list(queryset.order_by('-date', '-id')[:limit]),
        'total': sum_amount(queryset),
        'window': {'start': start, 'end': end},
    }
