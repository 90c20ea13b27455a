"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: JSON endpoints for listing and generating monthly
             financial reports, and the Excel download.
-------------------------------------------------------------------------
"""
from django.http import HttpResponse, JsonResponse

from apps.core.api import APIView, get_object_or_raise, isoformat, paginated, parse_json, validate_form
from apps.reporting.forms import GenerateReportForm, ReportQueryForm
from apps.reporting.models import FinancialReport
from apps.reporting.services import build_workbook, generate_report, list_reports
from apps.users.permissions import FinanceOverseerRequiredMixin, KepsekRequiredMixin

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def serialize_report(report: FinancialReport) -> dict:
    return {
        'id': report.pk,
        'type': report.report_type,
        'period': report.period,
        'title': report.title,
        'summary': report.summary,
        'total': report.total,
        'file_name': report.file_name,
        'created_by': report.created_by.name,
        'created_at': isoformat(report.created_at),
        'updated_at': isoformat(report.updated_at),
    }


class ReportListAPIView(KepsekRequiredMixin, APIView):
    """Stored reports, filtered by ``type`` and ``period``, paginated."""

    def get(self, request):
        params = validate_form(ReportQueryForm, request.GET)
        queryset = list_reports(params['type'] or None, params['period'] or None)
        return JsonResponse(paginated(request, queryset, serialize_report))


class ReportGenerateAPIView(KepsekRequiredMixin, APIView):
    """Generate (or regenerate) the report for ``type`` and ``period``."""

    def post(self, request):
        data = validate_form(GenerateReportForm, parse_json(request))
        report, entry_count = generate_report(data['type'], data['period'], request.user)
        return JsonResponse({
            'report': serialize_report(report),
            'meta': {'entry_count': entry_count},
        })


class ReportDownloadView(FinanceOverseerRequiredMixin, APIView):
    """Download a stored report as .xlsx."""

    def get(self, request, pk):
        report = get_object_or_raise(FinancialReport, "Report not found.", pk=pk)
        response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{report.file_name}"'
        build_workbook(report).save(response)
        return response
