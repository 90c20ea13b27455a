"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: App configuration for the budgeting module.
             Handles budget requests, approvals, disbursement, proofs
             and the annual school budget plan (RKAS).
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class BudgetingConfig(AppConfig):
    """Configuration class for the budgeting application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.budgeting'
    verbose_name = 'Budget Requests & RKAS'
