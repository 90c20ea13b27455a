"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Stored monthly financial reports. A report is a snapshot
             of ledger aggregates for one (type, period) pair and is
             overwritten on regeneration.
-------------------------------------------------------------------------
"""
from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import TimeStampedMixin


class ReportType(models.TextChoices):
    INCOME = 'INCOME', _('Penerimaan')
    EXPENSE = 'EXPENSE', _('Pengeluaran')
    BALANCE = 'BALANCE', _('Neraca')


class FinancialReport(TimeStampedMixin):
    """
    Monthly report generated by the Kepsek.

    Attributes:
        report_type: INCOME, EXPENSE or BALANCE.
        period: Calendar month as 'YYYY-MM'.
        summary: List of {label, amount, is_total} rows.
        file_name: Name used when the report is downloaded.
    """

    report_type = models.CharField(
        max_length=10,
        choices=ReportType.choices,
        verbose_name=_('Report Type')
    )
    period = models.CharField(
        max_length=7,
        verbose_name=_('Period'),
        help_text=_('Calendar month, YYYY-MM.')
    )
    title = models.CharField(
        max_length=200,
        verbose_name=_('Title')
    )
    summary = models.JSONField(
        default=list,
        verbose_name=_('Summary')
    )
    file_name = models.CharField(
        max_length=100,
        verbose_name=_('File Name')
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='financial_reports',
        verbose_name=_('Generated By')
    )

    class Meta:
        verbose_name = _('Financial Report')
        verbose_name_plural = _('Financial Reports')
        ordering = ['-period', 'report_type']
        constraints = [
            models.UniqueConstraint(fields=['report_type', 'period'], name='uniq_report_type_period'),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def total(self) -> int:
        """Amount of the total row, 0 if the summary has none."""
        for row in self.summary:
            if row.get('is_total'):
                return row['amount']
        return 0
