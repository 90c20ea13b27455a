"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Role dashboards. Each role gets its own endpoint; figures
             are recomputed on every request.
-------------------------------------------------------------------------
"""
from django.http import JsonResponse

from apps.core.api import APIView, parse_positive_int
from apps.dashboard.services import DashboardService
from apps.users.permissions import BendaharaRequiredMixin, CivitasRequiredMixin, KepsekRequiredMixin
from apps.users.views import serialize_user


class BendaharaDashboardView(BendaharaRequiredMixin, APIView):

    def get(self, request):
        return JsonResponse({
            'user': serialize_user(request.user),
            'summary': DashboardService.get_bendahara_summary(),
        })


class KepsekDashboardView(KepsekRequiredMixin, APIView):
    """``requests_take`` (1..20, default 5) and ``rkabs_take`` (1..20, default 3) size the pending lists."""

    def get(self, request):
        return JsonResponse({
            'user': serialize_user(request.user),
            'summary': DashboardService.get_kepsek_summary(
                requests_take=parse_positive_int(request.GET.get('requests_take'), 5, maximum=20),
                rkabs_take=parse_positive_int(request.GET.get('rkabs_take'), 3, maximum=20),
            ),
        })


class CivitasDashboardView(CivitasRequiredMixin, APIView):

    def get(self, request):
        return JsonResponse({
            'user': serialize_user(request.user),
            'summary': DashboardService.get_civitas_summary(
                request.user,
                limit_activities=parse_positive_int(request.GET.get('limit_activities'), 5, maximum=20),
            ),
        })
