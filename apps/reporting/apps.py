"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: App configuration for financial reports.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class ReportingConfig(AppConfig):
    """Configuration for the reporting application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.reporting'
    verbose_name = 'Financial Reports'
