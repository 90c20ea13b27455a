"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Unit tests for monthly report generation and export.
-------------------------------------------------------------------------
"""
import json
from datetime import date
from io import BytesIO

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse
from openpyxl import load_workbook

from apps.budgeting.models import BudgetRequest, RequestStatus
from apps.finance.models import EntryType, FundingSource, LedgerEntry
from apps.reporting.models import FinancialReport, ReportType
from apps.reporting.services import build_summary, generate_report
from apps.users.models import UserRole

User = get_user_model()


class ReportServiceTests(TestCase):
    """Tests for ledger aggregation per report type."""

    def setUp(self):
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
        civitas = User.objects.create_user(
            email='guru@example.com',
            password='testpass123',
            name='Gita Guru',
            role=UserRole.CIVITAS
        )
        bos = FundingSource.objects.create(name='Dana BOS')
        komite = FundingSource.objects.create(name='Komite Sekolah')
        request = BudgetRequest.objects.create(
            title='Perbaikan atap', amount_requested=300_000,
            status=RequestStatus.DISBURSED, submitted_by=civitas
        )

        self._entry(EntryType.INCOME, 2_000_000, date(2026, 7, 1), funding_source=bos)
        self._entry(EntryType.INCOME, 500_000, date(2026, 7, 10), funding_source=bos)
        self._entry(EntryType.INCOME, 750_000, date(2026, 7, 12), funding_source=komite)
        self._entry(EntryType.INCOME, 100_000, date(2026, 7, 20))
        self._entry(EntryType.EXPENSE, 300_000, date(2026, 7, 15), budget_request=request)
        self._entry(EntryType.EXPENSE, 50_000, date(2026, 7, 16), description='Biaya bank')
        self._entry(EntryType.INCOME, 9_999_999, date(2026, 8, 1), funding_source=bos)

    def _entry(self, entry_type, amount, entry_date, **extra):
        return LedgerEntry.objects.create(
            entry_type=entry_type, amount=amount, date=entry_date,
            recorded_by=self.bendahara, **extra
        )

    def test_income_grouped_by_funding_source(self) -> None:
        rows, count = build_summary(ReportType.INCOME, '2026-07')

        self.assertEqual(count, 4)
        self.assertEqual(rows, [
            {'label': 'Dana BOS', 'amount': 2_500_000, 'is_total': False},
            {'label': 'Komite Sekolah', 'amount': 750_000, 'is_total': False},
            {'label': 'Lainnya', 'amount': 100_000, 'is_total': False},
            {'label': 'Total Penerimaan', 'amount': 3_350_000, 'is_total': True},
        ])

    def test_expense_grouped_by_request(self) -> None:
        rows, count = build_summary(ReportType.EXPENSE, '2026-07')

        self.assertEqual(count, 2)
        labels = [row['label'] for row in rows]
        self.assertEqual(labels, ['Perbaikan atap', 'Pengeluaran Lainnya', 'Total Pengeluaran'])
        self.assertEqual(rows[-1]['amount'], 350_000)

    def test_balance(self) -> None:
        rows, _ = build_summary(ReportType.BALANCE, '2026-07')

        self.assertEqual([row['amount'] for row in rows], [3_350_000, 350_000, 3_000_000])
        self.assertTrue(rows[-1]['is_total'])

    def test_empty_period(self) -> None:
        rows, count = build_summary(ReportType.BALANCE, '2025-01')

        self.assertEqual(count, 0)
        self.assertEqual([row['amount'] for row in rows], [0, 0, 0])

    def test_regenerating_replaces_report(self) -> None:
        """One stored report per (type, period)."""
        first, _ = generate_report(ReportType.INCOME, '2026-07', self.kepsek)
        self._entry(EntryType.INCOME, 1_000, date(2026, 7, 30))
        second, count = generate_report(ReportType.INCOME, '2026-07', self.kepsek)

        self.assertEqual(FinancialReport.objects.count(), 1)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(count, 5)
        self.assertEqual(second.total, 3_351_000)
        self.assertEqual(second.file_name, 'laporan_income_2026-07.xlsx')


class ReportViewsTest(TestCase):
    """Test cases for report endpoints."""

    def setUp(self):
        self.client = Client()
        self.kepsek = User.objects.create_user(
            email='kepsek@example.com',
            password='testpass123',
            name='Kartini Kepsek',
            role=UserRole.KEPSEK
        )
        self.bendahara = User.objects.create_user(
            email='bendahara@example.com',
            password='testpass123',
            name='Bambang Bendahara',
            role=UserRole.BENDAHARA
        )

    def _generate(self, payload):
        return self.client.post(
            reverse('reporting:report_generate'),
            data=json.dumps(payload),
            content_type='application/json'
        )

    def test_generate_and_list(self) -> None:
        self.client.force_login(self.kepsek)

        response = self._generate({'type': 'BALANCE', 'period': '2026-07'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['meta']['entry_count'], 0)
        listing = self.client.get(reverse('reporting:report_list'), {'type': 'BALANCE'}).json()
        self.assertEqual(listing['total'], 1)
        self.assertEqual(listing['items'][0]['period'], '2026-07')

    def test_invalid_period(self) -> None:
        self.client.force_login(self.kepsek)

        response = self._generate({'type': 'INCOME', 'period': '07-2026'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('period', response.json()['details'])

    def test_bendahara_cannot_generate(self) -> None:
        self.client.force_login(self.bendahara)

        response = self._generate({'type': 'INCOME', 'period': '2026-07'})

        self.assertEqual(response.status_code, 403)

    def test_download_xlsx(self) -> None:
        report, _ = generate_report(ReportType.BALANCE, '2026-07', self.kepsek)
        self.client.force_login(self.bendahara)

        response = self.client.get(reverse('reporting:report_download', args=[report.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        self.assertIn('laporan_balance_2026-07.xlsx', response['Content-Disposition'])
        sheet = load_workbook(BytesIO(response.content)).active
        self.assertEqual(sheet.cell(row=4, column=1).value, 'Keterangan')
        self.assertEqual(sheet.cell(row=7, column=1).value, 'Saldo')
