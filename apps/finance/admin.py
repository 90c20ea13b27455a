"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Admin configuration for Finance models.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from .models import FundingSource, LedgerEntry


@admin.register(FundingSource)
class FundingSourceAdmin(admin.ModelAdmin):
    list_display = ('name', 'agency', 'created_at')
    search_fields = ('name', 'agency')


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    """Read-only: ledger entries are append-only."""

    list_display = ('date', 'entry_type', 'amount', 'description', 'funding_source', 'recorded_by')
    list_filter = ('entry_type', 'date')
    search_fields = ('description', 'funding_source__name', 'budget_request__title')
    date_hierarchy = 'date'
    readonly_fields = [field.name for field in LedgerEntry._meta.fields]

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
