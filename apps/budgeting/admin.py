"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Django admin configuration for the budgeting module.
             Status fields are read-only here; they only change through
             the workflow services.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.budgeting.models import BudgetRequest, RequestProof, Rkab, RkabItem


class RequestProofInline(admin.TabularInline):
    model = RequestProof
    extra = 0
    readonly_fields = ['file_name', 'mime_type', 'size', 'file_url', 'uploaded_by', 'uploaded_at']
    can_delete = False


@admin.register(BudgetRequest)
class BudgetRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'submitted_by', 'amount_display', 'status', 'submitted_at', 'needed_by']
    list_filter = ['status']
    search_fields = ['title', 'submitted_by__name', 'submitted_by__email']
    readonly_fields = [
        'status', 'submitted_by', 'submitted_at', 'approved_by', 'approved_at',
        'approval_note', 'disbursed_by', 'disbursed_at', 'completed_at',
        'created_at', 'updated_at',
    ]
    inlines = [RequestProofInline]
    ordering = ['-created_at']

    def amount_display(self, obj: BudgetRequest) -> str:
        return f"Rp {obj.amount_requested:,}"
    amount_display.short_description = _('Amount')


class RkabItemInline(admin.TabularInline):
    model = RkabItem
    extra = 0
    readonly_fields = ['used_amount', 'created_at']
    raw_id_fields = ['budget_request']


@admin.register(Rkab)
class RkabAdmin(admin.ModelAdmin):
    list_display = ['code', 'fiscal_year', 'status', 'created_by', 'submitted_at', 'approved_at']
    list_filter = ['status', 'fiscal_year']
    search_fields = ['code']
    readonly_fields = [
        'code', 'status', 'created_by', 'submitted_at', 'approved_by',
        'approved_at', 'approval_note', 'created_at', 'updated_at',
    ]
    inlines = [RkabItemInline]
    ordering = ['-fiscal_year', '-created_at']
