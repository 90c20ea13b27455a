"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Finance models - funding sources and the cash ledger.
             The ledger is append-only: balances are always derived
             by summing entries, never stored.
-------------------------------------------------------------------------
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models.functions import Lower
from django.utils.translation import gettext_lazy as _


class FundingSource(models.Model):
    """
    Origin of incoming money (e.g. "Dana BOS", "Komite Sekolah").

    Names are unique ignoring case; the service layer also collapses
    whitespace before looking a name up.

    Attributes:
        name: Display name of the source.
        agency: Optional issuing agency.
    """

    name = models.CharField(
        max_length=80,
        verbose_name=_('Name')
    )
    agency = models.CharField(
        max_length=80,
        null=True,
        blank=True,
        verbose_name=_('Agency'),
        help_text=_('Issuing agency, if any.')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )

    class Meta:
        verbose_name = _('Funding Source')
        verbose_name_plural = _('Funding Sources')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(Lower('name'), name='uniq_funding_source_name_ci'),
        ]

    def __str__(self) -> str:
        return self.name


class EntryType(models.TextChoices):
    """Direction of a ledger entry."""

    INCOME = 'INCOME', _('Pemasukan')
    EXPENSE = 'EXPENSE', _('Pengeluaran')


class LedgerEntry(models.Model):
    """
    A single movement of cash in or out of the school account.

    Income entries usually reference a funding source. Expense entries
    created by a disbursement reference the budget request and, when the
    request is covered by an RKAS plan, the RKAS line item.

    Entries are never updated or deleted once written.
    """

    entry_type = models.CharField(
        max_length=10,
        choices=EntryType.choices,
        verbose_name=_('Type')
    )
    amount = models.PositiveBigIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Amount'),
        help_text=_('Whole rupiah, always positive.')
    )
    date = models.DateField(
        verbose_name=_('Date')
    )
    description = models.CharField(
        max_length=200,
        null=True,
        blank=True,
        verbose_name=_('Description')
    )
    funding_source = models.ForeignKey(
        FundingSource,
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        null=True,
        blank=True,
        verbose_name=_('Funding Source')
    )
    rkab_item = models.ForeignKey(
        'budgeting.RkabItem',
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        null=True,
        blank=True,
        verbose_name=_('RKAS Item')
    )
    budget_request = models.ForeignKey(
        'budgeting.BudgetRequest',
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        null=True,
        blank=True,
        verbose_name=_('Budget Request'),
        help_text=_('Request whose disbursement produced this entry.')
    )
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        verbose_name=_('Recorded By')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )

    class Meta:
        verbose_name = _('Ledger Entry')
        verbose_name_plural = _('Ledger Entries')
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['entry_type', 'date'], name='ledger_type_date_idx'),
            models.Index(fields=['date'], name='ledger_date_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.get_entry_type_display()} Rp {self.amount} ({self.date})"

    @property
    def title(self) -> str:
        """Short label used in listings and reports."""
        if self.description:
            return self.description
        if self.entry_type == EntryType.INCOME and self.funding_source_id:
            return self.funding_source.name
        return self.get_entry_type_display()

    def clean(self) -> None:
        if self.amount is not None and self.amount <= 0:
            raise ValidationError({'amount': _('Amount must be a positive whole number.')})

    def save(self, *args, **kwargs) -> None:
        """Insert only; existing entries are immutable."""
        if not self._state.adding:
            raise ValidationError(_('Ledger entries are append-only and cannot be modified.'))
        self.clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(_('Ledger entries are append-only and cannot be deleted.'))
