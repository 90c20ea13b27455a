"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Budgeting models - budget requests, the annual school
             budget plan (RKAS) with its line items, and proof of use
             uploads. Status changes go through the transition tables
             in apps.budgeting.workflows.
-------------------------------------------------------------------------
"""
from typing import TYPE_CHECKING, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import ApprovalMixin, TimeStampedMixin

if TYPE_CHECKING:
    from apps.users.models import CustomUser


class RequestStatus(models.TextChoices):
    """Lifecycle of a budget request."""

    DRAFT = 'DRAFT', _('Draf')
    SUBMITTED = 'SUBMITTED', _('Menunggu Persetujuan')
    APPROVED = 'APPROVED', _('Disetujui')
    REJECTED = 'REJECTED', _('Ditolak')
    DISBURSED = 'DISBURSED', _('Dicairkan')
    COMPLETED = 'COMPLETED', _('Selesai')
    CANCELLED = 'CANCELLED', _('Dibatalkan')


class RkabStatus(models.TextChoices):
    """Lifecycle of an RKAS plan."""

    DRAFT = 'DRAFT', _('Draf')
    SUBMITTED = 'SUBMITTED', _('Diajukan')
    APPROVED = 'APPROVED', _('Disetujui')
    REJECTED = 'REJECTED', _('Ditolak')


class BudgetRequest(TimeStampedMixin, ApprovalMixin):
    """
    A request for funds raised by a Civitas member.

    Flow: DRAFT -> SUBMITTED -> APPROVED/REJECTED -> DISBURSED -> COMPLETED,
    with CANCELLED reachable by the owner before a decision.

    Attributes:
        title: Short title (3..120 characters).
        description: Optional justification.
        amount_requested: Whole rupiah, positive.
        needed_by: Optional date the funds are needed by.
        submitted_by: Owner of the request.
        disbursed_by: Bendahara who paid it out.
    """

    title = models.CharField(
        max_length=120,
        verbose_name=_('Title')
    )
    description = models.TextField(
        null=True,
        blank=True,
        verbose_name=_('Description')
    )
    amount_requested = models.PositiveBigIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Amount Requested')
    )
    status = models.CharField(
        max_length=10,
        choices=RequestStatus.choices,
        default=RequestStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status')
    )
    needed_by = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Needed By')
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='budget_requests',
        verbose_name=_('Submitted By')
    )
    submitted_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Submitted At')
    )
    disbursed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='disbursed_requests',
        null=True,
        blank=True,
        verbose_name=_('Disbursed By')
    )
    disbursed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Disbursed At')
    )
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Completed At')
    )

    class Meta:
        verbose_name = _('Budget Request')
        verbose_name_plural = _('Budget Requests')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['submitted_by', 'status'], name='budget_req_owner_status_idx'),
        ]

    def __str__(self) -> str:
        return f"#{self.pk} {self.title} ({self.get_status_display()})"

    def _move_to(self, target: str) -> None:
        from apps.budgeting.workflows import ensure_request_transition
        ensure_request_transition(self, target)
        self.status = target

    @property
    def is_editable(self) -> bool:
        return self.status in (RequestStatus.DRAFT, RequestStatus.SUBMITTED)

    @property
    def has_proof(self) -> bool:
        return self.proofs.exists()

    def submit(self, user: 'CustomUser') -> None:
        """
        DRAFT -> SUBMITTED.

        Raises:
            WorkflowTransitionException: If not DRAFT.
            ValidationError: If the needed-by date has already passed.
        """
        if self.needed_by and self.needed_by < timezone.localdate():
            raise ValidationError({'needed_by': _('The needed-by date cannot be in the past.')})
        self._move_to(RequestStatus.SUBMITTED)
        self.submitted_at = timezone.now()
        self.save(update_fields=['status', 'submitted_at', 'updated_at'])

    def decide(self, user: 'CustomUser', approve: bool, note: Optional[str] = None) -> None:
        """
        Record the Kepsek's decision on a submitted request.

        Raises:
            WorkflowTransitionException: If the request is not SUBMITTED.
            ValidationError: If a rejection carries no note.
        """
        if not approve and not (note or '').strip():
            raise ValidationError({'note': _('A note is required when rejecting.')})

        self._move_to(RequestStatus.APPROVED if approve else RequestStatus.REJECTED)
        self.approved_by = user
        self.approved_at = timezone.now()
        self.approval_note = (note or '').strip() or None
        self.save(update_fields=['status', 'approved_by', 'approved_at', 'approval_note', 'updated_at'])

    def mark_disbursed(self, user: 'CustomUser') -> None:
        """APPROVED -> DISBURSED. The ledger side is handled by the disbursement service."""
        self._move_to(RequestStatus.DISBURSED)
        self.disbursed_by = user
        self.disbursed_at = timezone.now()
        self.save(update_fields=['status', 'disbursed_by', 'disbursed_at', 'updated_at'])

    def complete(self) -> None:
        """
        DISBURSED -> COMPLETED. Requires at least one uploaded proof.

        Raises:
            WorkflowTransitionException: If not DISBURSED or no proof exists.
        """
        from apps.core.exceptions import WorkflowTransitionException

        if self.status == RequestStatus.DISBURSED and not self.has_proof:
            raise WorkflowTransitionException(
                "Cannot complete request. Upload at least one proof of use first."
            )
        self._move_to(RequestStatus.COMPLETED)
        self.completed_at = timezone.now()
        self.save(update_fields=['status', 'completed_at', 'updated_at'])

    def cancel(self) -> None:
        """DRAFT/SUBMITTED -> CANCELLED."""
        self._move_to(RequestStatus.CANCELLED)
        self.save(update_fields=['status', 'updated_at'])


class Rkab(TimeStampedMixin, ApprovalMixin):
    """
    RKAS (Rencana Kegiatan dan Anggaran Sekolah): the annual budget plan.

    Groups approved budget requests into allocated line items. Built by the
    Bendahara as a DRAFT, submitted, then decided by the Kepsek.
    """

    code = models.CharField(
        max_length=30,
        unique=True,
        verbose_name=_('Code'),
        help_text=_('RKAS-<year>-<sequence>, e.g. RKAS-2026-0001.')
    )
    fiscal_year = models.PositiveIntegerField(
        validators=[MinValueValidator(2000), MaxValueValidator(2100)],
        db_index=True,
        verbose_name=_('Fiscal Year')
    )
    status = models.CharField(
        max_length=10,
        choices=RkabStatus.choices,
        default=RkabStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status')
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='rkab_created',
        verbose_name=_('Created By')
    )
    submitted_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Submitted At')
    )

    class Meta:
        verbose_name = _('RKAS')
        verbose_name_plural = _('RKAS')
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.code} ({self.get_status_display()})"

    def _move_to(self, target: str) -> None:
        from apps.budgeting.workflows import ensure_rkab_transition
        ensure_rkab_transition(self, target)
        self.status = target

    def submit(self, user: 'CustomUser') -> None:
        """
        DRAFT -> SUBMITTED.

        Raises:
            WorkflowTransitionException: If not DRAFT.
            ValidationError: If the plan has no items.
        """
        if self.status == RkabStatus.DRAFT and not self.items.exists():
            raise ValidationError({'items': _('Add at least one item before submitting.')})
        self._move_to(RkabStatus.SUBMITTED)
        self.submitted_at = timezone.now()
        self.save(update_fields=['status', 'submitted_at', 'updated_at'])

    def decide(self, user: 'CustomUser', approve: bool, note: Optional[str] = None) -> None:
        """SUBMITTED -> APPROVED/REJECTED; rejections need a note."""
        if not approve and not (note or '').strip():
            raise ValidationError({'note': _('A note is required when rejecting.')})
        self._move_to(RkabStatus.APPROVED if approve else RkabStatus.REJECTED)
        self.approved_by = user
        self.approved_at = timezone.now()
        self.approval_note = (note or '').strip() or None
        self.save(update_fields=['status', 'approved_by', 'approved_at', 'approval_note', 'updated_at'])


class RkabItem(models.Model):
    """
    One approved budget request allocated into an RKAS.

    A request can sit in at most one RKAS. ``used_amount`` only grows, by
    disbursement, and never exceeds ``amount_allocated``.
    """

    rkab = models.ForeignKey(
        Rkab,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('RKAS')
    )
    budget_request = models.OneToOneField(
        BudgetRequest,
        on_delete=models.PROTECT,
        related_name='rkab_item',
        verbose_name=_('Budget Request')
    )
    amount_allocated = models.PositiveBigIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Amount Allocated')
    )
    used_amount = models.PositiveBigIntegerField(
        default=0,
        verbose_name=_('Used Amount')
    )
    note = models.CharField(
        max_length=200,
        null=True,
        blank=True,
        verbose_name=_('Note')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )

    class Meta:
        verbose_name = _('RKAS Item')
        verbose_name_plural = _('RKAS Items')
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.rkab.code} / {self.budget_request.title}"

    @property
    def remaining(self) -> int:
        return self.amount_allocated - self.used_amount

    def clean(self) -> None:
        if self.used_amount > self.amount_allocated:
            raise ValidationError({'used_amount': _('Used amount cannot exceed the allocation.')})


class RequestProof(models.Model):
    """Evidence of how disbursed funds were used (receipt photo or PDF)."""

    request = models.ForeignKey(
        BudgetRequest,
        on_delete=models.CASCADE,
        related_name='proofs',
        verbose_name=_('Budget Request')
    )
    file_key = models.CharField(
        max_length=255,
        verbose_name=_('Storage Key')
    )
    file_url = models.CharField(
        max_length=500,
        verbose_name=_('File URL')
    )
    file_name = models.CharField(
        max_length=255,
        verbose_name=_('Original File Name')
    )
    mime_type = models.CharField(
        max_length=100,
        verbose_name=_('MIME Type')
    )
    size = models.PositiveIntegerField(
        verbose_name=_('Size (bytes)')
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='uploaded_proofs',
        verbose_name=_('Uploaded By')
    )
    uploaded_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Uploaded At')
    )

    class Meta:
        verbose_name = _('Request Proof')
        verbose_name_plural = _('Request Proofs')
        ordering = ['-uploaded_at', '-id']

    def __str__(self) -> str:
        return self.file_name
