"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: JSON endpoints for the budget request lifecycle:
             Civitas requests and proofs, Kepsek approvals and
             Bendahara disbursements.
-------------------------------------------------------------------------
"""
from django.http import JsonResponse

from apps.core.api import (
    APIView,
    get_object_or_raise,
    isoformat,
    paginated,
    parse_json,
    validate_form,
)
from apps.budgeting import services
from apps.budgeting.forms import BudgetRequestForm, DecisionForm
from apps.budgeting.models import BudgetRequest, RequestStatus, RkabStatus
from apps.budgeting.serializers import (
    serialize_proof,
    serialize_request,
    serialize_request_detail,
    serialize_rkab_row,
)
from apps.budgeting.services_proof import upload_proof
from apps.budgeting.services_rkab import rkab_list
from apps.users.permissions import (
    BendaharaRequiredMixin,
    CivitasRequiredMixin,
    KepsekRequiredMixin,
    check_ownership,
)


def _owned_request(request, pk: int, action: str) -> BudgetRequest:
    budget_request = get_object_or_raise(BudgetRequest, "Budget request not found.", pk=pk)
    check_ownership(budget_request.submitted_by_id, request.user.pk, action=action)
    return budget_request


# ---------------------------------------------------------------------------
# Civitas
# ---------------------------------------------------------------------------

class RequestListCreateAPIView(CivitasRequiredMixin, APIView):
    """
    GET: own requests (``q``, ``status``, ``page``, ``limit``).
    POST: create a request; submitted right away unless ``draft`` is true.
    """

    def get(self, request):
        status = request.GET.get('status') or None
        if status not in RequestStatus.values:
            status = None
        queryset = services.requests_for_owner(
            request.user, request.GET.get('q', ''), status
        ).select_related('submitted_by')
        return JsonResponse(paginated(request, queryset, serialize_request))

    def post(self, request):
        data = validate_form(BudgetRequestForm, parse_json(request))
        budget_request = services.create_request(request.user, data)
        return JsonResponse({'request': serialize_request(budget_request)}, status=201)


class RequestDetailAPIView(CivitasRequiredMixin, APIView):
    """Own request detail with timeline; edit while open; delete drafts."""

    def get(self, request, pk):
        budget_request = _owned_request(request, pk, "view")
        return JsonResponse({'request': serialize_request_detail(budget_request)})

    def patch(self, request, pk):
        budget_request = _owned_request(request, pk, "edit")
        incoming = parse_json(request)
        current = {
            'title': budget_request.title,
            'description': budget_request.description or '',
            'amount_requested': budget_request.amount_requested,
        }
        cleaned = validate_form(BudgetRequestForm, {**current, **incoming})
        changes = {field: cleaned[field] for field in services.CONTENT_FIELDS if field in incoming}
        budget_request = services.update_request(pk, request.user, changes)
        return JsonResponse({'request': serialize_request(budget_request)})

    def delete(self, request, pk):
        _owned_request(request, pk, "delete")
        services.delete_request(pk, request.user)
        return JsonResponse({'success': True})


class RequestSubmitAPIView(CivitasRequiredMixin, APIView):

    def post(self, request, pk):
        _owned_request(request, pk, "submit")
        budget_request = services.submit_request(pk, request.user)
        return JsonResponse({'request': serialize_request(budget_request)})


class RequestCancelAPIView(CivitasRequiredMixin, APIView):

    def post(self, request, pk):
        _owned_request(request, pk, "cancel")
        budget_request = services.cancel_request(pk, request.user)
        return JsonResponse({'request': serialize_request(budget_request)})


class RequestProofAPIView(CivitasRequiredMixin, APIView):
    """
    GET: request summary plus its proofs, newest first.
    POST: upload one proof file (multipart field ``file``).
    """

    def get(self, request, pk):
        budget_request = _owned_request(request, pk, "view")
        proofs = budget_request.proofs.select_related('uploaded_by')
        return JsonResponse({
            'request': serialize_request(budget_request),
            'proofs': [serialize_proof(p) for p in proofs],
        })

    def post(self, request, pk):
        proof = upload_proof(pk, request.user, request.FILES.get('file'))
        return JsonResponse({'proof': serialize_proof(proof)}, status=201)


class EligibleForProofAPIView(CivitasRequiredMixin, APIView):
    """Own DISBURSED requests and whether each already has a proof."""

    def get(self, request):
        items = []
        for budget_request in services.eligible_for_proof(request.user).select_related('submitted_by'):
            data = serialize_request(budget_request)
            data['has_proof'] = bool(budget_request.proofs.all())
            items.append(data)
        return JsonResponse({'items': items})


# ---------------------------------------------------------------------------
# Kepsek
# ---------------------------------------------------------------------------

class ApprovalListAPIView(KepsekRequiredMixin, APIView):
    """
    ``tab=requests`` (default): SUBMITTED requests waiting for a decision.
    ``tab=rkab``: submitted RKAS plans, or every plan with ``status=all``.
    """

    def get(self, request):
        if request.GET.get('tab') == 'rkab':
            status = None if request.GET.get('status') == 'all' else RkabStatus.SUBMITTED
            payload = paginated(request, rkab_list(status), serialize_rkab_row)
            return JsonResponse({'tab': 'rkab', **payload})

        queryset = services.pending_requests(request.GET.get('q', ''))
        return JsonResponse({'tab': 'requests', **paginated(request, queryset, serialize_request)})


class ApprovalRequestDetailAPIView(KepsekRequiredMixin, APIView):

    def get(self, request, pk):
        budget_request = get_object_or_raise(BudgetRequest, "Budget request not found.", pk=pk)
        return JsonResponse({'request': serialize_request_detail(budget_request)})


class ApprovalDecisionAPIView(KepsekRequiredMixin, APIView):
    """Approve or reject a submitted request (``action``, ``note``)."""

    def post(self, request, pk):
        data = validate_form(DecisionForm, parse_json(request))
        budget_request = services.decide_request(
            pk, request.user, data['action'] == DecisionForm.ACTION_APPROVE, data['note']
        )
        return JsonResponse({'request': serialize_request(budget_request)})


# ---------------------------------------------------------------------------
# Bendahara
# ---------------------------------------------------------------------------

class DisbursementListAPIView(BendaharaRequiredMixin, APIView):
    """``tab=ready`` (APPROVED) or ``tab=done`` (DISBURSED/COMPLETED), with counts for both."""

    def get(self, request):
        tab = 'done' if request.GET.get('tab') == 'done' else 'ready'
        payload = paginated(request, services.disbursement_queue(tab), serialize_request)
        return JsonResponse({
            'tab': tab,
            'counts': {
                'ready': services.disbursement_queue('ready').count(),
                'done': services.disbursement_queue('done').count(),
            },
            **payload,
        })


class DisbursementDetailAPIView(BendaharaRequiredMixin, APIView):

    def get(self, request, pk):
        budget_request = get_object_or_raise(BudgetRequest, "Budget request not found.", pk=pk)
        return JsonResponse({'request': serialize_request_detail(budget_request)})


class DisburseAPIView(BendaharaRequiredMixin, APIView):
    """APPROVED -> DISBURSED; returns the request and its ledger entry."""

    def post(self, request, pk):
        entry = services.disburse_request(pk, request.user)
        budget_request = BudgetRequest.objects.select_related('submitted_by').get(pk=pk)
        return JsonResponse({
            'request': serialize_request(budget_request),
            'ledger_entry': {
                'id': entry.pk,
                'amount': entry.amount,
                'date': isoformat(entry.date),
                'description': entry.description,
                'rkab_item_id': entry.rkab_item_id,
            },
        })


class ValidateCompletionAPIView(BendaharaRequiredMixin, APIView):
    """DISBURSED -> COMPLETED after the Bendahara has reviewed the proofs."""

    def post(self, request, pk):
        budget_request = services.validate_completion(pk, request.user)
        return JsonResponse({'request': serialize_request(budget_request)})
