"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Monthly report generation from ledger entries and Excel
             export of stored reports.
-------------------------------------------------------------------------
"""
from typing import Dict, List, Tuple

from django.db import transaction
from django.db.models import F, Q, QuerySet, Sum
from django.db.models.functions import Coalesce
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from apps.core.logging import AuditLogger
from apps.finance.models import EntryType, LedgerEntry
from apps.finance.services import parse_period
from apps.reporting.models import FinancialReport, ReportType

REPORT_TITLES = {
    ReportType.INCOME: "Laporan Penerimaan Dana",
    ReportType.EXPENSE: "Laporan Pengeluaran Dana",
    ReportType.BALANCE: "Laporan Neraca Sederhana",
}

LABEL_OTHER_INCOME = "Lainnya"
LABEL_OTHER_EXPENSE = "Pengeluaran Lainnya"
LABEL_TOTAL_INCOME = "Total Penerimaan"
LABEL_TOTAL_EXPENSE = "Total Pengeluaran"
LABEL_BALANCE = "Saldo"


def _row(label: str, amount: int, is_total: bool = False) -> Dict:
    return {'label': label, 'amount': amount, 'is_total': is_total}


def _grouped_rows(entries: QuerySet, label_expression, fallback: str, total_label: str) -> List[Dict]:
    """Sum entries per label, largest first, followed by a total row."""
    grouped: Dict[str, int] = {}
    for group in entries.values(label=label_expression).annotate(amount=Sum('amount')).order_by():
        label = group['label'] or fallback
        grouped[label] = grouped.get(label, 0) + group['amount']

    rows = [_row(label, amount) for label, amount in grouped.items()]
    rows.sort(key=lambda row: (-row['amount'], row['label']))
    rows.append(_row(total_label, sum(grouped.values()), is_total=True))
    return rows


def build_summary(report_type: str, period: str) -> Tuple[List[Dict], int]:
    """
    Aggregate the ledger for one month.

    INCOME rows are grouped by funding source, EXPENSE rows by the request
    that was disbursed, BALANCE gives both totals and their difference.

    Returns:
        (summary rows, number of ledger entries considered).
    """
    start, end = parse_period(period)
    entries = LedgerEntry.objects.filter(date__gte=start, date__lt=end)

    if report_type == ReportType.INCOME:
        entries = entries.filter(entry_type=EntryType.INCOME)
        rows = _grouped_rows(entries, F('funding_source__name'),
                             LABEL_OTHER_INCOME, LABEL_TOTAL_INCOME)
    elif report_type == ReportType.EXPENSE:
        entries = entries.filter(entry_type=EntryType.EXPENSE)
        rows = _grouped_rows(
            entries,
            Coalesce('budget_request__title', 'rkab_item__budget_request__title'),
            LABEL_OTHER_EXPENSE, LABEL_TOTAL_EXPENSE
        )
    else:
        totals = entries.aggregate(
            income=Coalesce(Sum('amount', filter=Q(entry_type=EntryType.INCOME)), 0),
            expense=Coalesce(Sum('amount', filter=Q(entry_type=EntryType.EXPENSE)), 0),
        )
        rows = [
            _row(LABEL_TOTAL_INCOME, totals['income']),
            _row(LABEL_TOTAL_EXPENSE, totals['expense']),
            _row(LABEL_BALANCE, totals['income'] - totals['expense'], is_total=True),
        ]

    return rows, entries.count()


@transaction.atomic
def generate_report(report_type: str, period: str, user) -> Tuple[FinancialReport, int]:
    """
    Build the report for (report_type, period) and store it, replacing any
    earlier report for the same pair.

    Returns:
        (report, number of ledger entries aggregated).
    """
    summary, entry_count = build_summary(report_type, period)
    report, _ = FinancialReport.objects.update_or_create(
        report_type=report_type,
        period=period,
        defaults={
            'title': f"{REPORT_TITLES[report_type]} ({period})",
            'summary': summary,
            'file_name': f"laporan_{report_type.lower()}_{period}.xlsx",
            'created_by': user,
        },
    )
    AuditLogger.log_report_generated(report, entry_count, user)
    return report, entry_count


def list_reports(report_type: str = None, period: str = None) -> QuerySet:
    queryset = FinancialReport.objects.select_related('created_by')
    if report_type:
        queryset = queryset.filter(report_type=report_type)
    if period:
        queryset = queryset.filter(period=period)
    return queryset.order_by('-period', 'report_type')


def build_workbook(report: FinancialReport) -> Workbook:
    """Render a stored report as a single-sheet workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = report.get_report_type_display()[:31]

    ws.cell(row=1, column=1).value = report.title
    ws.cell(row=1, column=1).font = Font(bold=True, size=13)
    ws.cell(row=2, column=1).value = f"Periode: {report.period}"

    header_fill = PatternFill(start_color='366092', end_color='366092', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF')
    for col_num, header in enumerate(['Keterangan', 'Jumlah (Rp)'], 1):
        cell = ws.cell(row=4, column=col_num)
        cell.value = header
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center')

    for row_num, row in enumerate(report.summary, 5):
        label_cell = ws.cell(row=row_num, column=1)
        amount_cell = ws.cell(row=row_num, column=2)
        label_cell.value = row['label']
        amount_cell.value = row['amount']
        amount_cell.number_format = '#,##0'
        if row.get('is_total'):
            label_cell.font = Font(bold=True)
            amount_cell.font = Font(bold=True)

    ws.column_dimensions[get_column_letter(1)].width = 40
    ws.column_dimensions[get_column_letter(2)].width = 20
    return wb
