"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Dashboard service layer for the per-role summary cards.
             Every figure is computed from the current rows on each
             read; notification badges are derived counts of pending
             actions.
-------------------------------------------------------------------------
"""
from datetime import date
from typing import Any, Dict, Optional

from dateutil.relativedelta import relativedelta
from django.db.models import Count, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.budgeting.models import BudgetRequest, RequestStatus, Rkab, RkabStatus
from apps.budgeting.services_rkab import realisasi_percent
from apps.finance import services as ledger


class DashboardService:
    """
    Service class for dashboard data aggregation.

    One entry point per role; each returns a plain dict ready for
    JSON serialization.
    """

    @staticmethod
    def get_bendahara_summary(today: Optional[date] = None) -> Dict[str, Any]:
        """
        Treasurer cards.

        Returns:
            Dictionary containing:
                - balance: all-time income minus expense
                - income_12m / expense_12m: rolling twelve-month totals
                - ready_count / ready_total: APPROVED requests awaiting payment
                - missing_proof_count: DISBURSED requests without any proof
                - notification_count: ready_count + missing_proof_count
        """
        balance = ledger.all_time_balance()
        rolling = ledger.rolling_totals(today)
        start, end = ledger.rolling_window(today)

        ready = BudgetRequest.objects.filter(status=RequestStatus.APPROVED).aggregate(
            count=Count('id'),
            total=Coalesce(Sum('amount_requested'), 0),
        )
        missing_proof = BudgetRequest.objects.filter(
            status=RequestStatus.DISBURSED, proofs__isnull=True
        ).count()

        return {
            'balance': balance['balance'],
            'income_12m': rolling['income'],
            'expense_12m': rolling['expense'],
            'window': {'start': start.isoformat(), 'end': end.isoformat()},
            'ready_count': ready['count'],
            'ready_total': ready['total'],
            'missing_proof_count': missing_proof,
            'notification_count': ready['count'] + missing_proof,
            'monthly': ledger.monthly_series(6, today),
        }

    @staticmethod
    def get_kepsek_summary(requests_take: int = 5, rkabs_take: int = 3,
                           today: Optional[date] = None) -> Dict[str, Any]:
        """Principal cards: pending decisions and this year's utilization."""
        today = today or timezone.localdate()
        month_start = today.replace(day=1)
        next_month = month_start + relativedelta(months=1)

        pending_requests = BudgetRequest.objects.filter(
            status=RequestStatus.SUBMITTED
        ).select_related('submitted_by').order_by('-created_at', '-id')
        pending_rkabs = Rkab.objects.filter(
            status=RkabStatus.SUBMITTED
        ).select_related('created_by').order_by('-created_at', '-id')

        return {
            'waiting_approval': pending_requests.count(),
            'approved_this_month': BudgetRequest.objects.filter(
                status=RequestStatus.APPROVED,
                approved_at__date__gte=month_start,
                approved_at__date__lt=next_month,
            ).count(),
            'pending_requests': [
                {
                    'id': r.pk,
                    'title': r.title,
                    'amount_requested': r.amount_requested,
                    'submitted_by': r.submitted_by.name,
                    'created_at': r.created_at.isoformat(),
                }
                for r in pending_requests[:requests_take]
            ],
            'pending_rkabs': [
                {
                    'id': rkab.pk,
                    'code': rkab.code,
                    'fiscal_year': rkab.fiscal_year,
                    'created_by': rkab.created_by.name,
                    'created_at': rkab.created_at.isoformat(),
                }
                for rkab in pending_rkabs[:rkabs_take]
            ],
            'pending_rkab_count': pending_rkabs.count(),
            'realisasi': {
                'fiscal_year': today.year,
                'percent': realisasi_percent(today.year),
            },
        }

    @staticmethod
    def get_civitas_summary(user, limit_activities: int = 5) -> Dict[str, Any]:
        """Requester cards for the given user's own requests."""
        own = BudgetRequest.objects.filter(submitted_by=user)
        approved = own.filter(status=RequestStatus.APPROVED).aggregate(
            count=Count('id'),
            total=Coalesce(Sum('amount_requested'), 0),
        )
        awaiting_proof = own.filter(status=RequestStatus.DISBURSED, proofs__isnull=True).count()

        return {
            'active_count': own.filter(status=RequestStatus.SUBMITTED).count(),
            'approved_count': approved['count'],
            'approved_total': approved['total'],
            'awaiting_proof_count': awaiting_proof,
            'notification_count': awaiting_proof,
            'recent_activities': [
                {
                    'id': r.pk,
                    'title': r.title,
                    'amount_requested': r.amount_requested,
                    'status': r.status,
                    'status_label': r.get_status_display(),
                    'created_at': r.created_at.isoformat(),
                }
                for r in own.order_by('-created_at', '-id')[:limit_activities]
            ],
        }
