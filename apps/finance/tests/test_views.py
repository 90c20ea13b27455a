"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Test cases for funding source, ledger and income endpoints.
-------------------------------------------------------------------------
"""
import json

from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.finance.models import EntryType, FundingSource, LedgerEntry
from apps.users.models import UserRole

User = get_user_model()


class FinanceViewsTest(TestCase):
    """Test cases for the Bendahara finance endpoints."""

    def setUp(self):
        self.client = Client()
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
        self.client.force_login(self.bendahara)

    def _post(self, name: str, payload: dict):
        return self.client.post(reverse(name), data=json.dumps(payload), content_type='application/json')

    def test_funding_source_find_or_create_status_codes(self) -> None:
        """201 when created, 200 when an existing source is returned."""
        created = self._post('finance:funding_sources', {'name': 'Dana BOS'})
        existing = self._post('finance:funding_sources', {'name': 'dana bos'})

        self.assertEqual(created.status_code, 201)
        self.assertEqual(existing.status_code, 200)
        self.assertEqual(created.json()['funding_source']['id'], existing.json()['funding_source']['id'])
        self.assertEqual(FundingSource.objects.count(), 1)

    def test_record_income(self) -> None:
        source = FundingSource.objects.create(name='Dana BOS')

        response = self._post('finance:income', {
            'amount': 1500000,
            'date': timezone.localdate().isoformat(),
            'description': 'BOS   tahap 1',
            'funding_source_id': source.pk,
        })

        self.assertEqual(response.status_code, 201)
        entry = LedgerEntry.objects.get()
        self.assertEqual(entry.entry_type, EntryType.INCOME)
        self.assertEqual(entry.description, 'BOS tahap 1')

        listing = self.client.get(reverse('finance:income'))
        self.assertEqual(listing.json()['total'], 1500000)
        self.assertEqual(len(listing.json()['items']), 1)

    def test_ledger_entry_validation(self) -> None:
        response = self._post('finance:ledger_entries', {
            'entry_type': 'INCOME',
            'amount': 0,
            'date': 'not-a-date',
        })

        self.assertEqual(response.status_code, 400)
        details = response.json()['details']
        self.assertIn('amount', details)
        self.assertIn('date', details)

    def test_ledger_listing_defaults_to_current_month(self) -> None:
        self._post('finance:ledger_entries', {
            'entry_type': 'EXPENSE',
            'amount': 25000,
            'date': timezone.localdate().isoformat(),
            'description': 'ATK',
        })

        response = self.client.get(reverse('finance:ledger_entries'))

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(len(data['items']), 1)
        self.assertEqual(data['summary']['expense'], 25000)
        self.assertEqual(data['summary']['balance'], -25000)

    def test_ledger_listing_rejects_bad_period(self) -> None:
        response = self.client.get(reverse('finance:ledger_entries'), {'period': '2026-1'})

        self.assertEqual(response.status_code, 400)

    def test_kepsek_cannot_record_entries(self) -> None:
        self.client.force_login(self.kepsek)

        response = self._post('finance:income', {'amount': 1, 'date': '2026-01-01'})

        self.assertEqual(response.status_code, 403)

    def test_transaction_history(self) -> None:
        """The history spans months inside the rolling window."""
        today = timezone.localdate()
        for months_back, amount in [(3, 70000), (13, 990000)]:
            LedgerEntry.objects.create(
                entry_type=EntryType.INCOME, amount=amount,
                date=today - relativedelta(months=months_back), recorded_by=self.bendahara
            )

        response = self.client.get(reverse('finance:transactions'), {'filter': 'income'})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([item['amount'] for item in data['items']], [70000])
        self.assertEqual(data['summary'], {'income': 70000, 'expense': 0, 'balance': 70000})
        self.assertEqual(data['filter'], 'income')

    def test_transaction_history_rejects_unknown_filter(self) -> None:
        response = self.client.get(reverse('finance:transactions'), {'filter': 'transfer'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('filter', response.json()['details'])
