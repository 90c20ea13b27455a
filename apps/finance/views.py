"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: JSON endpoints for funding sources, the ledger and income.
             All endpoints are reserved for the Bendahara.
-------------------------------------------------------------------------
"""
from django.http import JsonResponse

from apps.core.api import APIView, parse_json, validate_form
from apps.finance import services
from apps.finance.forms import (
    FundingSourceForm,
    IncomeForm,
    LedgerEntryForm,
    LedgerQueryForm,
    TransactionQueryForm,
)
from apps.users.permissions import BendaharaRequiredMixin


def serialize_funding_source(source) -> dict:
    return {
        'id': source.pk,
        'name': source.name,
        'agency': source.agency,
    }


def serialize_entry(entry) -> dict:
    request = entry.budget_request
    if request is None and entry.rkab_item_id:
        request = entry.rkab_item.budget_request
    return {
        'id': entry.pk,
        'type': entry.entry_type,
        'title': entry.title,
        'amount': entry.amount,
        'date': entry.date.isoformat(),
        'description': entry.description,
        'funding_source': (serialize_funding_source(entry.funding_source)
                           if entry.funding_source_id else None),
        'rkab_item_id': entry.rkab_item_id,
        'budget_request': ({'id': request.pk, 'title': request.title}
                           if request is not None else None),
        'recorded_by': entry.recorded_by.name,
    }


class FundingSourceAPIView(BendaharaRequiredMixin, APIView):
    """
    GET: search funding sources by name (``?q=``).
    POST: find-or-create by name; 200 for an existing match, 201 when new.
    """

    def get(self, request):
        sources = services.search_funding_sources(request.GET.get('q', ''))
        return JsonResponse({'items': [serialize_funding_source(s) for s in sources]})

    def post(self, request):
        data = validate_form(FundingSourceForm, parse_json(request))
        source, created = services.find_or_create_funding_source(data['name'], data['agency'])
        return JsonResponse(
            {'funding_source': serialize_funding_source(source), 'created': created},
            status=201 if created else 200
        )


class LedgerEntryAPIView(BendaharaRequiredMixin, APIView):
    """Ledger listing for one month (with search and keyset paging) and manual entry."""

    def get(self, request):
        params = validate_form(LedgerQueryForm, request.GET)
        period = params['period'] or services.current_period()
        page = services.list_entries(
            period=period,
            entry_type=params['type'] or None,
            query=params['q'],
            cursor=params['cursor'],
            take=params['take'] or 20,
        )
        return JsonResponse({
            'period': period,
            'items': [serialize_entry(e) for e in page['items']],
            'next_cursor': page['next_cursor'],
            'summary': page['totals'],
        })

    def post(self, request):
        data = validate_form(LedgerEntryForm, parse_json(request))
        entry = services.record_entry(
            request.user,
            data['entry_type'],
            data['amount'],
            data['date'],
            description=data['description'],
            funding_source_id=data['funding_source_id'],
            rkab_item_id=data['rkab_item_id'],
        )
        return JsonResponse({'entry': serialize_entry(entry)}, status=201)


class IncomeAPIView(BendaharaRequiredMixin, APIView):
    """Rolling twelve-month income and income recording."""

    def get(self, request):
        income = services.recent_income()
        return JsonResponse({
            'items': [serialize_entry(e) for e in income['items']],
            'total': income['total'],
            'window': {
                'start': income['window']['start'].isoformat(),
                'end': income['window']['end'].isoformat(),
            },
        })

    def post(self, request):
        data = validate_form(IncomeForm, parse_json(request))
        entry = services.record_income(
            request.user,
            data['amount'],
            data['date'],
            description=data['description'],
            funding_source_id=data['funding_source_id'],
        )
        return JsonResponse({'entry': serialize_entry(entry)}, status=201)


class TransactionAPIView(BendaharaRequiredMixin, APIView):
    """
    Funds in/out history over the rolling twelve months.

    ``filter`` (all/income/expense) and ``q`` narrow the items; the summary
    always covers both directions for the whole window.
    """

    def get(self, request):
        params = validate_form(TransactionQueryForm, request.GET)
        page = services.list_transactions(
            entry_type=TransactionQueryForm.FILTER_TYPES.get(params['filter']),
            query=params['q'],
            cursor=params['cursor'],
            take=params['take'] or 20,
        )
        return JsonResponse({
            'window': {
                'start': page['window']['start'].isoformat(),
                'end': page['window']['end'].isoformat(),
            },
            'filter': params['filter'],
            'q': params['q'] or None,
            'summary': page['totals'],
            'items': [serialize_entry(e) for e in page['items']],
            'next_cursor': page['next_cursor'],
        })
