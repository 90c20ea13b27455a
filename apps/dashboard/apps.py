"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: App configuration for the role dashboards.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class DashboardConfig(AppConfig):
    """Configuration for the dashboard application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.dashboard'
    verbose_name = 'Dashboards'
