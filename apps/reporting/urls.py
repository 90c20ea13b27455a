"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: URL configuration for financial reports.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.reporting.views import ReportDownloadView, ReportGenerateAPIView, ReportListAPIView

app_name = 'reporting'

urlpatterns = [
    path('', ReportListAPIView.as_view(), name='report_list'),
    path('generate/', ReportGenerateAPIView.as_view(), name='report_generate'),
    path('<int:pk>/download/', ReportDownloadView.as_view(), name='report_download'),
]
