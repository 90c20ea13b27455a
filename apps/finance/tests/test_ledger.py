"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Tests for funding sources, ledger balances and search.
-------------------------------------------------------------------------
"""
from datetime import date

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from apps.core.exceptions import ValidationFailedException
from apps.finance import services
from apps.finance.models import EntryType, FundingSource, LedgerEntry
from apps.users.models import UserRole

User = get_user_model()


class FundingSourceTests(TestCase):
    """Tests for find-or-create of funding sources."""

    def test_same_name_different_case_is_reused(self) -> None:
        """'BOS' then 'bos' resolve to one source."""
        first, created_first = services.find_or_create_funding_source('BOS')
        second, created_second = services.find_or_create_funding_source('bos')

        self.assertTrue(created_first)
        self.assertFalse(created_second)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(FundingSource.objects.count(), 1)

    def test_whitespace_is_collapsed(self) -> None:
        source, _ = services.find_or_create_funding_source('  Dana   BOS  ', agency='  Kemendikbud ')

        self.assertEqual(source.name, 'Dana BOS')
        self.assertEqual(source.agency, 'Kemendikbud')
        _, created = services.find_or_create_funding_source('dana bos')
        self.assertFalse(created)

    def test_search(self) -> None:
        services.find_or_create_funding_source('Dana BOS')
        services.find_or_create_funding_source('Komite Sekolah')

        names = [s.name for s in services.search_funding_sources('kom')]
        self.assertEqual(names, ['Komite Sekolah'])
        self.assertEqual(len(services.search_funding_sources('')), 2)


class LedgerBalanceTests(TestCase):
    """Tests for derived ledger totals."""

    def setUp(self):
        self.bendahara = User.objects.create_user(
            email='bendahara@example.com',
            password='testpass123',
            name='Bambang Bendahara',
            role=UserRole.BENDAHARA
        )
        self.bos, _ = services.find_or_create_funding_source('Dana BOS')

    def _entry(self, entry_type, amount, entry_date, **extra):
        return services.record_entry(self.bendahara, entry_type, amount, entry_date, **extra)

    def test_empty_period_is_zero(self) -> None:
        self.assertEqual(
            services.period_summary('2026-03'),
            {'income': 0, 'expense': 0, 'balance': 0}
        )

    def test_period_balance_is_income_minus_expense(self) -> None:
        """Only entries inside the month are counted."""
        self._entry(EntryType.INCOME, 1_000_000, date(2026, 3, 1), funding_source_id=self.bos.pk)
        self._entry(EntryType.INCOME, 250_000, date(2026, 3, 31))
        self._entry(EntryType.EXPENSE, 400_000, date(2026, 3, 15))
        self._entry(EntryType.EXPENSE, 999_999, date(2026, 4, 1))

        summary = services.period_summary('2026-03')

        self.assertEqual(summary['income'], 1_250_000)
        self.assertEqual(summary['expense'], 400_000)
        self.assertEqual(summary['balance'], 850_000)

    def test_all_time_balance(self) -> None:
        self._entry(EntryType.INCOME, 500_000, date(2020, 1, 1))
        self._entry(EntryType.EXPENSE, 200_000, date(2026, 1, 1))

        self.assertEqual(services.all_time_balance()['balance'], 300_000)

    def test_rolling_window_excludes_older_entries(self) -> None:
        today = date(2026, 10, 19)
        self._entry(EntryType.INCOME, 100, date(2025, 10, 19))
        self._entry(EntryType.INCOME, 1_000, date(2025, 10, 18))
        self._entry(EntryType.EXPENSE, 50, date(2026, 10, 19))

        totals = services.rolling_totals(today)

        self.assertEqual(totals['income'], 100)
        self.assertEqual(totals['expense'], 50)

    def test_invalid_period_rejected(self) -> None:
        with self.assertRaises(ValidationFailedException):
            services.period_summary('2026-13')

    def test_unknown_funding_source_rejected(self) -> None:
        with self.assertRaises(ValidationFailedException) as ctx:
            self._entry(EntryType.INCOME, 100, date(2026, 3, 1), funding_source_id=9999)
        self.assertIn('funding_source_id', ctx.exception.details)
        self.assertEqual(LedgerEntry.objects.count(), 0)

    def test_entries_are_append_only(self) -> None:
        entry = self._entry(EntryType.INCOME, 100, date(2026, 3, 1))

        entry.amount = 200
        with self.assertRaises(ValidationError):
            entry.save()
        with self.assertRaises(ValidationError):
            entry.delete()
        self.assertEqual(LedgerEntry.objects.get(pk=entry.pk).amount, 100)


class LedgerListingTests(TestCase):
    """Tests for filtered listing with keyset pagination."""

    def setUp(self):
        self.bendahara = User.objects.create_user(
            email='bendahara@example.com',
            password='testpass123',
            name='Bambang Bendahara',
            role=UserRole.BENDAHARA
        )
        self.komite, _ = services.find_or_create_funding_source('Komite Sekolah')
        for day in range(1, 6):
            services.record_entry(
                self.bendahara, EntryType.INCOME, day * 1000, date(2026, 5, day),
                description=f'Setoran {day}'
            )
        services.record_entry(
            self.bendahara, EntryType.INCOME, 7000, date(2026, 5, 6),
            funding_source_id=self.komite.pk
        )

    def test_pages_follow_date_desc_and_do_not_overlap(self) -> None:
        first = services.list_entries(period='2026-05', take=4)
        second = services.list_entries(period='2026-05', cursor=first['next_cursor'], take=4)

        first_dates = [e.date.day for e in first['items']]
        second_dates = [e.date.day for e in second['items']]
        self.assertEqual(first_dates, [6, 5, 4, 3])
        self.assertEqual(second_dates, [2, 1])
        self.assertIsNone(second['next_cursor'])
        self.assertEqual(first['totals']['income'], 22_000)

    def test_search_matches_funding_source_name(self) -> None:
        page = services.list_entries(period='2026-05', query='komite')

        self.assertEqual([e.amount for e in page['items']], [7000])
        self.assertEqual(page['totals']['income'], 7000)

    def test_search_matches_description_case_insensitive(self) -> None:
        page = services.list_entries(period='2026-05', query='SETORAN 3')

        self.assertEqual([e.amount for e in page['items']], [3000])


class TransactionHistoryTests(TestCase):
    """Tests for the rolling twelve-month transaction history."""

    def setUp(self):
        self.bendahara = User.objects.create_user(
            email='bendahara@example.com',
            password='testpass123',
            name='Bambang Bendahara',
            role=UserRole.BENDAHARA
        )
        self.today = date(2026, 10, 19)
        self.recent = services.record_entry(self.bendahara, EntryType.INCOME, 400_000,
                                            date(2026, 7, 19), description='Dana BOS tahap 3')
        self.spent = services.record_entry(self.bendahara, EntryType.EXPENSE, 150_000,
                                           date(2026, 10, 1), description='Kertas ujian')
        self.stale = services.record_entry(self.bendahara, EntryType.INCOME, 900_000,
                                           date(2025, 9, 19), description='Dana BOS lama')

    def test_spans_months_within_window(self) -> None:
        """Entries from three months back are listed, thirteen months back are not."""
        page = services.list_transactions(today=self.today)

        self.assertEqual([e.pk for e in page['items']], [self.spent.pk, self.recent.pk])
        self.assertEqual(page['totals'], {'income': 400_000, 'expense': 150_000, 'balance': 250_000})
        self.assertEqual(page['window']['start'], date(2025, 10, 19))

    def test_type_filter_keeps_full_summary(self) -> None:
        page = services.list_transactions(entry_type=EntryType.EXPENSE, today=self.today)

        self.assertEqual([e.pk for e in page['items']], [self.spent.pk])
        self.assertEqual(page['totals']['income'], 400_000)

    def test_query_and_cursor(self) -> None:
        first = services.list_transactions(take=1, today=self.today)
        second = services.list_transactions(cursor=first['next_cursor'], take=1, today=self.today)

        self.assertEqual([e.pk for e in second['items']], [self.recent.pk])
        self.assertIsNone(second['next_cursor'])
        searched = services.list_transactions(query='bos', today=self.today)
        self.assertEqual([e.pk for e in searched['items']], [self.recent.pk])
