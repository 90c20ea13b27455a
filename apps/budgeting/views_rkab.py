"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: JSON endpoints for RKAS (annual school budget plan):
             building and submitting plans (Bendahara), deciding them
             (Kepsek) and reading utilization.
-------------------------------------------------------------------------
"""
from django.http import JsonResponse
from django.utils import timezone

from apps.core.api import APIView, get_object_or_raise, paginated, parse_json, validate_form
from apps.core.exceptions import ValidationFailedException
from apps.budgeting import services_rkab
from apps.budgeting.forms import DecisionForm, RkabForm, RkabItemForm
from apps.budgeting.models import Rkab, RkabStatus
from apps.budgeting.serializers import (
    serialize_request,
    serialize_rkab,
    serialize_rkab_detail,
    serialize_rkab_row,
)
from apps.users.permissions import (
    BendaharaRequiredMixin,
    FinanceOverseerRequiredMixin,
    KepsekRequiredMixin,
)


class RkabListCreateAPIView(BendaharaRequiredMixin, APIView):
    """
    GET: every plan with item count and total allocation (``status`` filter).
    POST: start a DRAFT plan for ``fiscal_year``.
    """

    def get(self, request):
        status = request.GET.get('status')
        if status not in RkabStatus.values:
            status = None
        return JsonResponse(paginated(request, services_rkab.rkab_list(status), serialize_rkab_row))

    def post(self, request):
        data = validate_form(RkabForm, parse_json(request))
        rkab = services_rkab.create_rkab(request.user, data['fiscal_year'])
        return JsonResponse({'rkab': serialize_rkab(rkab)}, status=201)


class RkabCandidatesAPIView(BendaharaRequiredMixin, APIView):
    """Approved requests not yet allocated to any plan."""

    def get(self, request):
        candidates = services_rkab.allocation_candidates()
        return JsonResponse({'items': [serialize_request(r) for r in candidates]})


class RkabDetailAPIView(FinanceOverseerRequiredMixin, APIView):

    def get(self, request, pk):
        rkab = get_object_or_raise(Rkab.objects.select_related('created_by', 'approved_by'),
                                   "RKAS not found.", pk=pk)
        return JsonResponse({'rkab': serialize_rkab_detail(rkab)})


class RkabItemsAPIView(BendaharaRequiredMixin, APIView):
    """Add a batch of items: ``{"items": [{budget_request_id, amount_allocated, note}]}``."""

    def post(self, request, pk):
        raw_items = parse_json(request).get('items')
        if not isinstance(raw_items, list) or not raw_items:
            raise ValidationFailedException(details={'items': ["Provide a non-empty list of items."]})

        items, errors = [], {}
        for index, raw in enumerate(raw_items):
            form = RkabItemForm(data=raw if isinstance(raw, dict) else {})
            if form.is_valid():
                items.append(form.cleaned_data)
            else:
                errors[f'items[{index}]'] = [
                    f"{field}: {message}" for field, messages in form.errors.items() for message in messages
                ]
        if errors:
            raise ValidationFailedException("Some RKAS items are invalid.", details=errors)

        services_rkab.add_rkab_items(pk, request.user, items)
        rkab = Rkab.objects.select_related('created_by', 'approved_by').get(pk=pk)
        return JsonResponse({'rkab': serialize_rkab_detail(rkab)}, status=201)


class RkabSubmitAPIView(BendaharaRequiredMixin, APIView):

    def post(self, request, pk):
        rkab = services_rkab.submit_rkab(pk, request.user)
        return JsonResponse({'rkab': serialize_rkab(rkab)})


class RkabDecisionAPIView(KepsekRequiredMixin, APIView):

    def post(self, request, pk):
        data = validate_form(DecisionForm, parse_json(request))
        rkab = services_rkab.decide_rkab(
            pk, request.user, data['action'] == DecisionForm.ACTION_APPROVE, data['note']
        )
        return JsonResponse({'rkab': serialize_rkab(rkab)})


class RealisasiAPIView(FinanceOverseerRequiredMixin, APIView):
    """Utilization percentage of approved RKAS budget for ``fiscal_year`` (default: this year)."""

    def get(self, request):
        data = validate_form(RkabForm, {
            'fiscal_year': request.GET.get('fiscal_year') or timezone.localdate().year
        })
        return JsonResponse({
            'fiscal_year': data['fiscal_year'],
            'percent': services_rkab.realisasi_percent(data['fiscal_year']),
        })
