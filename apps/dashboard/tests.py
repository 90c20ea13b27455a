"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Tests for the role dashboards.
-------------------------------------------------------------------------
"""
from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.budgeting.models import BudgetRequest, RequestProof, RequestStatus
from apps.dashboard.services import DashboardService
from apps.finance.models import EntryType, LedgerEntry
from apps.users.models import UserRole

User = get_user_model()


class DashboardServiceTests(TestCase):
    """Tests for the per-role summary figures."""

    def setUp(self):
        self.civitas = User.objects.create_user(
            email='guru@example.com',
            password='testpass123',
            name='Gita Guru',
            role=UserRole.CIVITAS
        )
        self.bendahara = User.objects.create_user(
            email='bendahara@example.com',
            password='testpass123',
            name='Bambang Bendahara',
            role=UserRole.BENDAHARA
        )
        self.kepsek = User.objects.create_user(
            email='kepsek@example.com',
            password='testpass123',
            name='Kartini Kepsek',
            role=UserRole.KEPSEK
        )

    def _request(self, status, amount=100_000, **extra):
        return BudgetRequest.objects.create(
            title=f'Permintaan {status}', amount_requested=amount,
            status=status, submitted_by=self.civitas, **extra
        )

    def test_bendahara_summary(self) -> None:
        today = date(2026, 10, 19)
        for entry_type, amount, entry_date in [
            (EntryType.INCOME, 1_000_000, date(2026, 9, 1)),
            (EntryType.EXPENSE, 300_000, date(2026, 10, 1)),
            (EntryType.INCOME, 50_000, date(2024, 1, 1)),
        ]:
            LedgerEntry.objects.create(entry_type=entry_type, amount=amount, date=entry_date,
                                       recorded_by=self.bendahara)
        self._request(RequestStatus.APPROVED, amount=200_000)
        self._request(RequestStatus.APPROVED, amount=150_000)
        self._request(RequestStatus.DISBURSED)
        with_proof = self._request(RequestStatus.DISBURSED)
        RequestProof.objects.create(
            request=with_proof, file_key='proofs/a.pdf', file_url='/uploads/proofs/a.pdf',
            file_name='a.pdf', mime_type='application/pdf', size=10, uploaded_by=self.civitas
        )

        summary = DashboardService.get_bendahara_summary(today)

        self.assertEqual(summary['balance'], 750_000)
        self.assertEqual(summary['income_12m'], 1_000_000)
        self.assertEqual(summary['expense_12m'], 300_000)
        self.assertEqual(summary['ready_count'], 2)
        self.assertEqual(summary['ready_total'], 350_000)
        self.assertEqual(summary['missing_proof_count'], 1)
        self.assertEqual(summary['notification_count'], 3)
        self.assertEqual(len(summary['monthly']), 6)

    def test_kepsek_summary(self) -> None:
        self._request(RequestStatus.SUBMITTED)
        self._request(RequestStatus.SUBMITTED)
        self._request(RequestStatus.APPROVED, approved_by=self.kepsek, approved_at=timezone.now())

        summary = DashboardService.get_kepsek_summary(requests_take=1)

        self.assertEqual(summary['waiting_approval'], 2)
        self.assertEqual(len(summary['pending_requests']), 1)
        self.assertEqual(summary['approved_this_month'], 1)
        self.assertEqual(summary['pending_rkab_count'], 0)
        self.assertEqual(summary['realisasi']['percent'], 0)

    def test_civitas_summary_is_own_only(self) -> None:
        other = User.objects.create_user(
            email='staf@example.com', password='testpass123', name='Sari Staf', role=UserRole.CIVITAS
        )
        BudgetRequest.objects.create(title='Bukan milik saya', amount_requested=1,
                                     status=RequestStatus.SUBMITTED, submitted_by=other)
        self._request(RequestStatus.SUBMITTED)
        self._request(RequestStatus.APPROVED, amount=250_000)
        self._request(RequestStatus.DISBURSED)

        summary = DashboardService.get_civitas_summary(self.civitas)

        self.assertEqual(summary['active_count'], 1)
        self.assertEqual(summary['approved_count'], 1)
        self.assertEqual(summary['approved_total'], 250_000)
        self.assertEqual(summary['awaiting_proof_count'], 1)
        self.assertEqual(len(summary['recent_activities']), 3)


class DashboardViewsTest(TestCase):
    """Role gating for the dashboard endpoints."""

    def setUp(self):
        self.client = Client()
        self.civitas = User.objects.create_user(
            email='guru@example.com',
            password='testpass123',
            name='Gita Guru',
            role=UserRole.CIVITAS
        )

    def test_own_dashboard(self) -> None:
        self.client.force_login(self.civitas)

        response = self.client.get(reverse('dashboard:civitas'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['user']['role'], UserRole.CIVITAS)
        self.assertIn('summary', response.json())

    def test_other_role_dashboard_forbidden(self) -> None:
        self.client.force_login(self.civitas)

        self.assertEqual(self.client.get(reverse('dashboard:bendahara')).status_code, 403)
        self.assertEqual(self.client.get(reverse('dashboard:kepsek')).status_code, 403)

    def test_anonymous_rejected(self) -> None:
        self.assertEqual(self.client.get(reverse('dashboard:civitas')).status_code, 401)
