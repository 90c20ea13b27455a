"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Reusable abstract model mixins for timestamps and
             workflow state tracking.
-------------------------------------------------------------------------
"""
from django.conf import settings
from django.db import models


class TimeStampedMixin(models.Model):
    """
    Abstract mixin that adds created_at and updated_at timestamps.

    Attributes:
        created_at: Timestamp when the record was created.
        updated_at: Timestamp when the record was last modified.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
        help_text="Timestamp when this record was created."
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
        help_text="Timestamp when this record was last modified."
    )

    class Meta:
        abstract = True


class ApprovalMixin(models.Model):
    """
    Abstract mixin for records decided by an approver.

    Holds the approver, the decision time and the optional note
    (mandatory for rejections, enforced by the workflow).
    """

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_approved",
        null=True,
        blank=True,
        verbose_name="Approved By",
        help_text="Approver who decided this record."
    )
    approved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Decided At"
    )
    approval_note = models.TextField(
        null=True,
        blank=True,
        verbose_name="Approval Note"
    )

    class Meta:
        abstract = True
