"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Admin configuration for financial reports.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.reporting.models import FinancialReport


@admin.register(FinancialReport)
class FinancialReportAdmin(admin.ModelAdmin):
    list_display = ['title', 'report_type', 'period', 'created_by', 'updated_at']
    list_filter = ['report_type']
    search_fields = ['title', 'period']
    readonly_fields = ['report_type', 'period', 'title', 'summary', 'file_name',
                       'created_by', 'created_at', 'updated_at']
