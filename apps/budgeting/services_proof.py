"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Proof-of-use uploads. Files go through the storage port;
             the metadata row and the DISBURSED -> COMPLETED flip are
             written in one transaction, and the stored file is removed
             again if that transaction fails.
-------------------------------------------------------------------------
"""
import logging
import uuid
from typing import Optional

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile
from django.db import transaction

from apps.core.exceptions import (
    FileTooLargeException,
    InvalidFileTypeException,
    ResourceNotFoundException,
    ValidationFailedException,
    WorkflowTransitionException,
)
from apps.core.logging import AuditLogger
from apps.core.storage import FileStore, get_file_store
from apps.budgeting.models import BudgetRequest, RequestProof, RequestStatus
from apps.users.permissions import check_ownership

logger = logging.getLogger(__name__)

PROOF_STATUSES = (RequestStatus.DISBURSED, RequestStatus.COMPLETED)


def validate_upload(uploaded_file: Optional[UploadedFile]) -> str:
    """
    Check type and size of an uploaded proof.

    Returns:
        The file extension to store it under.

    Raises:
        ValidationFailedException: If no file was sent.
        InvalidFileTypeException: If the content type is not allowed.
        FileTooLargeException: If the file exceeds the upload limit.
    """
    if uploaded_file is None:
        raise ValidationFailedException(details={'file': ["A file is required."]})

    allowed = settings.PROOF_ALLOWED_CONTENT_TYPES
    if uploaded_file.content_type not in allowed:
        raise InvalidFileTypeException(
            f"File type '{uploaded_file.content_type}' is not allowed. "
            f"Upload JPG, PNG or PDF."
        )
    if uploaded_file.size > settings.PROOF_MAX_UPLOAD_SIZE:
        raise FileTooLargeException(
            f"File is {uploaded_file.size} bytes; the limit is "
            f"{settings.PROOF_MAX_UPLOAD_SIZE} bytes."
        )
    return allowed[uploaded_file.content_type]


def _check_uploadable(budget_request: BudgetRequest, user) -> None:
    check_ownership(budget_request.submitted_by_id, user.pk, action="upload proof for")
    if budget_request.status not in PROOF_STATUSES:
        raise WorkflowTransitionException(
            f"Cannot upload proof. Current status is '{budget_request.get_status_display()}'. "
            "Proof can only be uploaded after disbursement."
        )


def upload_proof(request_id: int, user, uploaded_file: Optional[UploadedFile],
                 store: Optional[FileStore] = None) -> RequestProof:
    """
    Store a proof file for an own DISBURSED or COMPLETED request.

    The first proof on a DISBURSED request completes it.
    """
    extension = validate_upload(uploaded_file)

    try:
        budget_request = BudgetRequest.objects.get(pk=request_id)
    except BudgetRequest.DoesNotExist:
        raise ResourceNotFoundException("Budget request not found.")
    _check_uploadable(budget_request, user)

    store = store or get_file_store()
    key = store.put(f"{settings.PROOF_UPLOAD_DIR}/{uuid.uuid4()}.{extension}", uploaded_file)

    completed_now = False
    try:
        with transaction.atomic():
            budget_request = BudgetRequest.objects.select_for_update().get(pk=request_id)
            _check_uploadable(budget_request, user)
            proof = RequestProof.objects.create(
                request=budget_request,
                file_key=key,
                file_url=store.url(key),
                file_name=uploaded_file.name[:255],
                mime_type=uploaded_file.content_type,
                size=uploaded_file.size,
                uploaded_by=user,
            )
            if budget_request.status == RequestStatus.DISBURSED:
                budget_request.complete()
                completed_now = True
    except Exception:
        logger.warning(f"Proof metadata write failed for request #{request_id}; removing {key}")
        store.delete(key)
        raise

    AuditLogger.log_proof_uploaded(proof, user)
    if completed_now:
        AuditLogger.log_request_completed(budget_request, user)
    return proof
