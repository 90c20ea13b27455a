"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Centralized audit logging for workflow operations.
-------------------------------------------------------------------------
"""
import logging
from typing import Dict, Any

logger = logging.getLogger('sikas.audit')


class AuditLogger:
    """Centralized logging for budget workflow operations"""

    @staticmethod
    def log_request_submitted(budget_request, user):
        """Log request submission"""
        logger.info(
            f"Request submitted: #{budget_request.pk} {budget_request.title} | "
            f"Amount: Rp {budget_request.amount_requested} | "
            f"Submitted by: {user.email}",
            extra={
                'request_id': budget_request.pk,
                'amount': budget_request.amount_requested,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_request_decided(budget_request, user):
        """Log approval or rejection of a request"""
        logger.info(
            f"Request {budget_request.status}: #{budget_request.pk} | "
            f"Note: {budget_request.approval_note or '-'} | "
            f"Decided by: {user.email}",
            extra={
                'request_id': budget_request.pk,
                'status': budget_request.status,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_request_disbursed(budget_request, entry, user):
        """Log disbursement with its ledger entry"""
        logger.info(
            f"Request disbursed: #{budget_request.pk} {budget_request.title} | "
            f"Amount: Rp {entry.amount} | "
            f"Ledger entry: #{entry.pk} | "
            f"Disbursed by: {user.email}",
            extra={
                'request_id': budget_request.pk,
                'ledger_entry_id': entry.pk,
                'amount': entry.amount,
                'rkab_item_id': entry.rkab_item_id,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_request_completed(budget_request, user):
        """Log request completion"""
        logger.info(
            f"Request completed: #{budget_request.pk} | Completed by: {user.email}",
            extra={'request_id': budget_request.pk, 'user_id': user.id}
        )

    @staticmethod
    def log_proof_uploaded(proof, user):
        """Log proof upload"""
        logger.info(
            f"Proof uploaded: {proof.file_name} ({proof.size} bytes) | "
            f"Request: #{proof.request_id} | "
            f"Uploaded by: {user.email}",
            extra={
                'proof_id': proof.pk,
                'request_id': proof.request_id,
                'mime_type': proof.mime_type,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_rkab_event(rkab, event: str, user):
        """Log RKAS creation, submission and decisions"""
        logger.info(
            f"RKAS {event}: {rkab.code} (FY {rkab.fiscal_year}) | "
            f"Status: {rkab.status} | By: {user.email}",
            extra={
                'rkab_id': rkab.pk,
                'rkab_code': rkab.code,
                'event': event,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_report_generated(report, entry_count: int, user):
        """Log report generation"""
        logger.info(
            f"Report generated: {report.report_type} {report.period} | "
            f"Entries aggregated: {entry_count} | By: {user.email}",
            extra={
                'report_id': report.pk,
                'report_type': report.report_type,
                'period': report.period,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_validation_error(operation: str, errors: Dict[str, Any], context: Dict[str, Any]):
        """Log validation errors"""
        logger.warning(
            f"Validation error in {operation}: {errors}",
            extra={**context, 'validation_errors': errors}
        )

    @staticmethod
    def log_workflow_error(operation: str, error: str, context: Dict[str, Any]):
        """Log workflow transition errors"""
        logger.warning(
            f"Workflow error in {operation}: {error}",
            extra={**context, 'workflow_error': error}
        )
