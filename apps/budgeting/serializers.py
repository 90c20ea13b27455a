"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: JSON shapes for budget requests, proofs and RKAS plans.
-------------------------------------------------------------------------
"""
from apps.core.api import isoformat
from apps.budgeting.models import BudgetRequest, Rkab
from apps.budgeting.services_rkab import rkab_totals
from apps.budgeting.workflows import build_timeline


def serialize_request(budget_request: BudgetRequest) -> dict:
    return {
        'id': budget_request.pk,
        'title': budget_request.title,
        'description': budget_request.description,
        'amount_requested': budget_request.amount_requested,
        'status': budget_request.status,
        'status_label': budget_request.get_status_display(),
        'needed_by': isoformat(budget_request.needed_by),
        'submitted_by': {
            'id': budget_request.submitted_by_id,
            'name': budget_request.submitted_by.name,
        },
        'created_at': isoformat(budget_request.created_at),
        'submitted_at': isoformat(budget_request.submitted_at),
        'approved_at': isoformat(budget_request.approved_at),
        'approval_note': budget_request.approval_note,
        'disbursed_at': isoformat(budget_request.disbursed_at),
        'completed_at': isoformat(budget_request.completed_at),
    }


def serialize_proof(proof) -> dict:
    return {
        'id': proof.pk,
        'file_url': proof.file_url,
        'file_name': proof.file_name,
        'mime_type': proof.mime_type,
        'size': proof.size,
        'uploaded_by': proof.uploaded_by.name,
        'uploaded_at': isoformat(proof.uploaded_at),
    }


def serialize_request_detail(budget_request: BudgetRequest) -> dict:
    """Request plus approver names, timeline, proofs and RKAS allocation."""
    data = serialize_request(budget_request)
    item = getattr(budget_request, 'rkab_item', None)
    data.update({
        'approved_by': budget_request.approved_by.name if budget_request.approved_by_id else None,
        'disbursed_by': budget_request.disbursed_by.name if budget_request.disbursed_by_id else None,
        'timeline': build_timeline(budget_request),
        'proofs': [serialize_proof(p) for p in budget_request.proofs.select_related('uploaded_by')],
        'rkab_item': {
            'id': item.pk,
            'rkab_code': item.rkab.code,
            'amount_allocated': item.amount_allocated,
            'used_amount': item.used_amount,
        } if item else None,
    })
    return data


def serialize_rkab(rkab: Rkab) -> dict:
    return {
        'id': rkab.pk,
        'code': rkab.code,
        'fiscal_year': rkab.fiscal_year,
        'status': rkab.status,
        'status_label': rkab.get_status_display(),
        'created_by': rkab.created_by.name,
        'created_at': isoformat(rkab.created_at),
        'submitted_at': isoformat(rkab.submitted_at),
        'approved_at': isoformat(rkab.approved_at),
        'approval_note': rkab.approval_note,
    }


def serialize_rkab_row(rkab: Rkab) -> dict:
    """List row; expects the annotations added by ``services_rkab.rkab_list``."""
    data = serialize_rkab(rkab)
    data['item_count'] = rkab.item_count
    data['total_allocated'] = rkab.total_allocated
    return data


def serialize_rkab_detail(rkab: Rkab) -> dict:
    data = serialize_rkab(rkab)
    data['approved_by'] = rkab.approved_by.name if rkab.approved_by_id else None
    data['items'] = [
        {
            'id': item.pk,
            'amount_allocated': item.amount_allocated,
            'used_amount': item.used_amount,
            'remaining': item.remaining,
            'note': item.note,
            'request': {
                'id': item.budget_request_id,
                'title': item.budget_request.title,
                'amount_requested': item.budget_request.amount_requested,
                'status': item.budget_request.status,
                'submitted_by': item.budget_request.submitted_by.name,
            },
        }
        for item in rkab.items.select_related('budget_request__submitted_by')
    ]
    data['totals'] = rkab_totals(rkab)
    return data
