"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Unit tests for the budgeting module - request workflow,
             disbursement, RKAS and proof uploads.
-------------------------------------------------------------------------
"""
import json
from datetime import timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError, IntegrityError, transaction
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.budgeting import services, services_rkab
from apps.budgeting.models import (
    BudgetRequest, RequestProof, RequestStatus, Rkab, RkabItem, RkabStatus
)
from apps.budgeting.services_proof import upload_proof
from apps.budgeting.workflows import REQUEST_TRANSITIONS, can_transition, get_valid_transitions
from apps.core.exceptions import (
    BudgetExceededException,
    InvalidFileTypeException,
    FileTooLargeException,
    NotOwnerException,
    ValidationFailedException,
    WorkflowTransitionException,
)
from apps.core.storage import FileStore
from apps.finance.models import EntryType, LedgerEntry
from apps.users.models import UserRole

User = get_user_model()


class RecordingFileStore(FileStore):
    """In-memory store that remembers every key written and deleted."""

    def __init__(self):
        super().__init__(storage=InMemoryStorage())
        self.written = []
        self.deleted = []

    def put(self, key, content):
        key = super().put(key, content)
        self.written.append(key)
        return key

    def delete(self, key):
        self.deleted.append(key)
        super().delete(key)


class BudgetingTestMixin:
    """Users and factory helpers shared by the budgeting tests."""

    def setUp(self):
        self.civitas = User.objects.create_user(
            email='guru@example.com',
            password='testpass123',
            name='Gita Guru',
            role=UserRole.CIVITAS
        )
        self.other_civitas = User.objects.create_user(
            email='staf@example.com',
            password='testpass123',
            name='Sari Staf',
            role=UserRole.CIVITAS
        )
        self.bendahara = User.objects.create_user(
            email='bendahara@example.com',
            password='testpass123',
            name='Bambang Bendahara',
            role=UserRole.BENDAHARA
        )
        self.kepsek = User.objects.create_user(
            email='kepsek@example.com',
            password='testpass123',
            name='Kartini Kepsek',
            role=UserRole.KEPSEK
        )

    def make_request(self, status=RequestStatus.SUBMITTED, amount=500_000, owner=None, **extra):
        return BudgetRequest.objects.create(
            title=extra.pop('title', 'Beli spidol dan kertas'),
            amount_requested=amount,
            status=status,
            submitted_by=owner or self.civitas,
            **extra
        )


class RequestWorkflowTests(BudgetingTestMixin, TestCase):
    """Tests for the request state machine."""

    def test_transition_table_is_closed(self) -> None:
        """Every edge missing from the table is refused."""
        for current in RequestStatus.values:
            for target in RequestStatus.values:
                allowed = target in REQUEST_TRANSITIONS[current]
                self.assertEqual(can_transition(current, target), allowed, f"{current} -> {target}")

    def test_terminal_statuses_have_no_exits(self) -> None:
        for status in (RequestStatus.REJECTED, RequestStatus.COMPLETED, RequestStatus.CANCELLED):
            self.assertEqual(get_valid_transitions(status), [])

    def test_disallowed_transitions_raise(self) -> None:
        """Model methods refuse to skip steps."""
        draft = self.make_request(status=RequestStatus.DRAFT)
        with self.assertRaises(WorkflowTransitionException):
            draft.mark_disbursed(self.bendahara)
        with self.assertRaises(WorkflowTransitionException):
            draft.decide(self.kepsek, approve=True)

        approved = self.make_request(status=RequestStatus.APPROVED)
        with self.assertRaises(WorkflowTransitionException):
            approved.cancel()
        with self.assertRaises(WorkflowTransitionException):
            approved.submit(self.civitas)

        approved.refresh_from_db()
        self.assertEqual(approved.status, RequestStatus.APPROVED)

    def test_create_submits_unless_draft(self) -> None:
        submitted = services.create_request(self.civitas, {
            'title': 'Alat peraga IPA', 'amount_requested': 250_000,
        })
        draft = services.create_request(self.civitas, {
            'title': 'Bola voli', 'amount_requested': 150_000, 'draft': True,
        })

        self.assertEqual(submitted.status, RequestStatus.SUBMITTED)
        self.assertIsNotNone(submitted.submitted_at)
        self.assertEqual(draft.status, RequestStatus.DRAFT)
        self.assertIsNone(draft.submitted_at)

    def test_reject_then_approve_again_conflicts(self) -> None:
        """A decided request cannot be decided a second time."""
        budget_request = self.make_request()

        services.decide_request(budget_request.pk, self.kepsek, approve=False, note='budget limit')
        budget_request.refresh_from_db()
        self.assertEqual(budget_request.status, RequestStatus.REJECTED)
        self.assertEqual(budget_request.approval_note, 'budget limit')
        self.assertEqual(budget_request.approved_by, self.kepsek)

        with self.assertRaises(WorkflowTransitionException):
            services.decide_request(budget_request.pk, self.kepsek, approve=True)

    def test_reject_requires_note(self) -> None:
        budget_request = self.make_request()

        with self.assertRaises(ValidationError):
            services.decide_request(budget_request.pk, self.kepsek, approve=False, note='  ')

        budget_request.refresh_from_db()
        self.assertEqual(budget_request.status, RequestStatus.SUBMITTED)

    def test_update_keeps_status_and_checks_owner(self) -> None:
        budget_request = self.make_request()

        updated = services.update_request(budget_request.pk, self.civitas, {'amount_requested': 450_000})
        self.assertEqual(updated.amount_requested, 450_000)
        self.assertEqual(updated.status, RequestStatus.SUBMITTED)

        with self.assertRaises(NotOwnerException):
            services.update_request(budget_request.pk, self.other_civitas, {'title': 'Diambil alih'})

    def test_update_after_decision_conflicts(self) -> None:
        budget_request = self.make_request(status=RequestStatus.APPROVED)

        with self.assertRaises(WorkflowTransitionException):
            services.update_request(budget_request.pk, self.civitas, {'title': 'Judul baru'})

    def test_draft_with_lapsed_needed_by_cannot_be_submitted(self) -> None:
        """A needed-by date that passed while the request sat in draft blocks submission."""
        draft = self.make_request(
            status=RequestStatus.DRAFT,
            needed_by=timezone.localdate() + timedelta(days=1)
        )
        BudgetRequest.objects.filter(pk=draft.pk).update(
            needed_by=timezone.localdate() - timedelta(days=3)
        )

        with self.assertRaises(ValidationError) as ctx:
            services.submit_request(draft.pk, self.civitas)

        self.assertIn('needed_by', ctx.exception.message_dict)
        draft.refresh_from_db()
        self.assertEqual(draft.status, RequestStatus.DRAFT)
        self.assertIsNone(draft.submitted_at)

    def test_only_drafts_can_be_deleted(self) -> None:
        submitted = self.make_request()
        draft = self.make_request(status=RequestStatus.DRAFT)

        with self.assertRaises(WorkflowTransitionException):
            services.delete_request(submitted.pk, self.civitas)
        services.delete_request(draft.pk, self.civitas)

        self.assertFalse(BudgetRequest.objects.filter(pk=draft.pk).exists())
        self.assertTrue(BudgetRequest.objects.filter(pk=submitted.pk).exists())

    def test_complete_requires_proof(self) -> None:
        budget_request = self.make_request(status=RequestStatus.DISBURSED)

        with self.assertRaises(WorkflowTransitionException):
            services.validate_completion(budget_request.pk, self.bendahara)


class DisbursementTests(BudgetingTestMixin, TestCase):
    """Tests for paying out approved requests."""

    def setUp(self):
        super().setUp()
        self.rkab = services_rkab.create_rkab(self.bendahara, 2026)

    def _allocate(self, budget_request, allocated, used=0):
        return RkabItem.objects.create(
            rkab=self.rkab,
            budget_request=budget_request,
            amount_allocated=allocated,
            used_amount=used,
        )

    def test_disburse_writes_ledger_and_usage(self) -> None:
        """The request flips, one expense is appended and usage grows by the amount."""
        budget_request = self.make_request(status=RequestStatus.APPROVED, amount=500_000)
        item = self._allocate(budget_request, 600_000, used=0)

        entry = services.disburse_request(budget_request.pk, self.bendahara)

        budget_request.refresh_from_db()
        item.refresh_from_db()
        self.assertEqual(budget_request.status, RequestStatus.DISBURSED)
        self.assertEqual(budget_request.disbursed_by, self.bendahara)
        self.assertEqual(item.used_amount, 500_000)
        self.assertEqual(entry.entry_type, EntryType.EXPENSE)
        self.assertEqual(entry.amount, 500_000)
        self.assertEqual(entry.rkab_item, item)
        self.assertEqual(entry.budget_request, budget_request)
        self.assertEqual(entry.description, 'Pencairan: Beli spidol dan kertas')

    def test_disburse_without_rkab(self) -> None:
        budget_request = self.make_request(status=RequestStatus.APPROVED)

        entry = services.disburse_request(budget_request.pk, self.bendahara)

        self.assertIsNone(entry.rkab_item)
        self.assertEqual(LedgerEntry.objects.count(), 1)

    def test_over_budget_changes_nothing(self) -> None:
        budget_request = self.make_request(status=RequestStatus.APPROVED, amount=500_000)
        item = self._allocate(budget_request, 500_000, used=100_000)

        with self.assertRaises(BudgetExceededException) as ctx:
            services.disburse_request(budget_request.pk, self.bendahara)

        self.assertEqual(ctx.exception.status_code, 422)
        budget_request.refresh_from_db()
        item.refresh_from_db()
        self.assertEqual(budget_request.status, RequestStatus.APPROVED)
        self.assertIsNone(budget_request.disbursed_at)
        self.assertEqual(item.used_amount, 100_000)
        self.assertEqual(LedgerEntry.objects.count(), 0)

    def test_second_disbursement_conflicts(self) -> None:
        budget_request = self.make_request(status=RequestStatus.APPROVED)
        services.disburse_request(budget_request.pk, self.bendahara)

        with self.assertRaises(WorkflowTransitionException):
            services.disburse_request(budget_request.pk, self.bendahara)

        self.assertEqual(LedgerEntry.objects.count(), 1)

    def test_queue_tabs(self) -> None:
        ready = self.make_request(status=RequestStatus.APPROVED)
        done = self.make_request(status=RequestStatus.COMPLETED)
        self.make_request(status=RequestStatus.SUBMITTED)

        self.assertEqual(list(services.disbursement_queue('ready')), [ready])
        self.assertEqual(list(services.disbursement_queue('done')), [done])


class RkabTests(BudgetingTestMixin, TestCase):
    """Tests for RKAS codes, allocation and utilization."""

    def test_codes_are_sequential_per_year(self) -> None:
        first = services_rkab.create_rkab(self.bendahara, 2026)
        second = services_rkab.create_rkab(self.bendahara, 2026)
        other_year = services_rkab.create_rkab(self.bendahara, 2027)

        self.assertEqual(first.code, 'RKAS-2026-0001')
        self.assertEqual(second.code, 'RKAS-2026-0002')
        self.assertEqual(other_year.code, 'RKAS-2027-0001')
        self.assertEqual(first.status, RkabStatus.DRAFT)

    def test_colliding_code_is_rejected(self) -> None:
        """Two creators computing the same code: the second insert fails."""
        services_rkab.create_rkab(self.bendahara, 2026)

        with mock.patch('apps.budgeting.services_rkab.generate_rkab_code', return_value='RKAS-2026-0001'):
            with self.assertRaises(IntegrityError):
                with transaction.atomic():
                    services_rkab.create_rkab(self.bendahara, 2026)

        self.assertEqual(Rkab.objects.count(), 1)

    def test_add_items_validates_whole_batch(self) -> None:
        rkab = services_rkab.create_rkab(self.bendahara, 2026)
        approved = self.make_request(status=RequestStatus.APPROVED, amount=300_000)
        submitted = self.make_request(status=RequestStatus.SUBMITTED)

        with self.assertRaises(ValidationFailedException) as ctx:
            services_rkab.add_rkab_items(rkab.pk, self.bendahara, [
                {'budget_request_id': approved.pk, 'amount_allocated': 300_000},
                {'budget_request_id': approved.pk, 'amount_allocated': 300_000},
                {'budget_request_id': submitted.pk, 'amount_allocated': 500_000},
            ])

        details = ctx.exception.details
        self.assertNotIn('items[0]', details)
        self.assertIn('items[1]', details)
        self.assertIn('items[2]', details)
        self.assertEqual(rkab.items.count(), 0)

    def test_allocation_below_requested_rejected(self) -> None:
        rkab = services_rkab.create_rkab(self.bendahara, 2026)
        approved = self.make_request(status=RequestStatus.APPROVED, amount=300_000)

        with self.assertRaises(ValidationFailedException):
            services_rkab.add_rkab_items(rkab.pk, self.bendahara, [
                {'budget_request_id': approved.pk, 'amount_allocated': 299_999},
            ])

    def test_request_can_sit_in_one_rkab_only(self) -> None:
        first = services_rkab.create_rkab(self.bendahara, 2026)
        second = services_rkab.create_rkab(self.bendahara, 2026)
        approved = self.make_request(status=RequestStatus.APPROVED, amount=300_000)
        services_rkab.add_rkab_items(first.pk, self.bendahara, [
            {'budget_request_id': approved.pk, 'amount_allocated': 300_000},
        ])

        with self.assertRaises(ValidationFailedException):
            services_rkab.add_rkab_items(second.pk, self.bendahara, [
                {'budget_request_id': approved.pk, 'amount_allocated': 300_000},
            ])
        self.assertNotIn(approved, list(services_rkab.allocation_candidates()))

    def test_submit_and_decide(self) -> None:
        rkab = services_rkab.create_rkab(self.bendahara, 2026)
        with self.assertRaises(ValidationError):
            services_rkab.submit_rkab(rkab.pk, self.bendahara)

        approved = self.make_request(status=RequestStatus.APPROVED, amount=300_000)
        services_rkab.add_rkab_items(rkab.pk, self.bendahara, [
            {'budget_request_id': approved.pk, 'amount_allocated': 400_000, 'note': 'Semester 1'},
        ])
        services_rkab.submit_rkab(rkab.pk, self.bendahara)
        rkab = services_rkab.decide_rkab(rkab.pk, self.kepsek, approve=True)

        self.assertEqual(rkab.status, RkabStatus.APPROVED)
        with self.assertRaises(WorkflowTransitionException):
            services_rkab.add_rkab_items(rkab.pk, self.bendahara, [
                {'budget_request_id': approved.pk, 'amount_allocated': 400_000},
            ])

    def test_realisasi_percent(self) -> None:
        """Only approved plans count; the percentage is rounded half up."""
        approved_plan = services_rkab.create_rkab(self.bendahara, 2026)
        approved_plan.status = RkabStatus.APPROVED
        approved_plan.save()
        draft_plan = services_rkab.create_rkab(self.bendahara, 2026)

        RkabItem.objects.create(
            rkab=approved_plan, budget_request=self.make_request(status=RequestStatus.DISBURSED),
            amount_allocated=200_000, used_amount=125_000
        )
        RkabItem.objects.create(
            rkab=draft_plan, budget_request=self.make_request(status=RequestStatus.APPROVED),
            amount_allocated=1_000_000, used_amount=0
        )

        self.assertEqual(services_rkab.realisasi_percent(2026), 63)
        self.assertEqual(services_rkab.realisasi_percent(2030), 0)

    def test_totals(self) -> None:
        rkab = services_rkab.create_rkab(self.bendahara, 2026)
        RkabItem.objects.create(
            rkab=rkab, budget_request=self.make_request(status=RequestStatus.APPROVED),
            amount_allocated=500_000, used_amount=200_000
        )

        self.assertEqual(services_rkab.rkab_totals(rkab), {
            'total_allocated': 500_000, 'total_used': 200_000, 'remaining': 300_000,
        })


class ProofUploadTests(BudgetingTestMixin, TestCase):
    """Tests for proof uploads through the storage port."""

    def setUp(self):
        super().setUp()
        self.store = RecordingFileStore()
        self.budget_request = self.make_request(status=RequestStatus.DISBURSED)

    def _pdf(self, size=64):
        return SimpleUploadedFile('nota.pdf', b'%' * size, content_type='application/pdf')

    def test_text_file_rejected_before_storage(self) -> None:
        upload = SimpleUploadedFile('nota.txt', b'hello', content_type='text/plain')

        with self.assertRaises(InvalidFileTypeException):
            upload_proof(self.budget_request.pk, self.civitas, upload, store=self.store)

        self.assertEqual(self.store.written, [])
        self.assertEqual(RequestProof.objects.count(), 0)

    def test_oversized_file_rejected(self) -> None:
        with self.settings(PROOF_MAX_UPLOAD_SIZE=10):
            with self.assertRaises(FileTooLargeException):
                upload_proof(self.budget_request.pk, self.civitas, self._pdf(size=11), store=self.store)

        self.assertEqual(self.store.written, [])

    def test_missing_file_rejected(self) -> None:
        with self.assertRaises(ValidationFailedException):
            upload_proof(self.budget_request.pk, self.civitas, None, store=self.store)

    def test_first_proof_completes_request(self) -> None:
        proof = upload_proof(self.budget_request.pk, self.civitas, self._pdf(), store=self.store)

        self.budget_request.refresh_from_db()
        self.assertEqual(self.budget_request.status, RequestStatus.COMPLETED)
        self.assertIsNotNone(self.budget_request.completed_at)
        self.assertEqual(proof.mime_type, 'application/pdf')
        self.assertTrue(proof.file_key.startswith('proofs/'))
        self.assertTrue(proof.file_key.endswith('.pdf'))
        self.assertTrue(self.store.exists(proof.file_key))

    def test_completed_request_accepts_more_proofs(self) -> None:
        upload_proof(self.budget_request.pk, self.civitas, self._pdf(), store=self.store)
        upload_proof(self.budget_request.pk, self.civitas, self._pdf(), store=self.store)

        self.assertEqual(self.budget_request.proofs.count(), 2)

    def test_failed_metadata_write_removes_file(self) -> None:
        with mock.patch.object(RequestProof.objects, 'create', side_effect=DatabaseError('disk full')):
            with self.assertRaises(DatabaseError):
                upload_proof(self.budget_request.pk, self.civitas, self._pdf(), store=self.store)

        self.assertEqual(len(self.store.written), 1)
        self.assertEqual(self.store.deleted, self.store.written)
        self.assertFalse(self.store.exists(self.store.written[0]))
        self.budget_request.refresh_from_db()
        self.assertEqual(self.budget_request.status, RequestStatus.DISBURSED)

    def test_not_owner_and_wrong_status(self) -> None:
        with self.assertRaises(NotOwnerException):
            upload_proof(self.budget_request.pk, self.other_civitas, self._pdf(), store=self.store)

        approved = self.make_request(status=RequestStatus.APPROVED)
        with self.assertRaises(WorkflowTransitionException):
            upload_proof(approved.pk, self.civitas, self._pdf(), store=self.store)
        self.assertEqual(self.store.written, [])


class RequestViewsTest(BudgetingTestMixin, TestCase):
    """Test cases for the request, approval and disbursement endpoints."""

    def setUp(self):
        super().setUp()
        self.client = Client()

    def _post(self, url: str, payload: dict):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')

    def test_submit_reject_and_conflict(self) -> None:
        """Civitas submits, Kepsek rejects with a note, approving afterwards conflicts."""
        self.client.force_login(self.civitas)
        tomorrow = timezone.localdate() + timedelta(days=1)
        response = self._post(reverse('budgeting:request_list'), {
            'title': 'Perbaikan proyektor',
            'amount_requested': 500000,
            'needed_by': tomorrow.isoformat(),
        })
        self.assertEqual(response.status_code, 201)
        created = response.json()['request']
        self.assertEqual(created['status'], RequestStatus.SUBMITTED)

        self.client.force_login(self.kepsek)
        decision_url = reverse('budgeting:approval_decision', args=[created['id']])
        response = self._post(decision_url, {'action': 'reject', 'note': 'budget limit'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['request']['status'], RequestStatus.REJECTED)
        self.assertEqual(response.json()['request']['approval_note'], 'budget limit')

        response = self._post(decision_url, {'action': 'approve'})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['error_code'], 'ERR_INVALID_TRANSITION')

    def test_reject_without_note_is_invalid(self) -> None:
        budget_request = self.make_request()
        self.client.force_login(self.kepsek)

        response = self._post(reverse('budgeting:approval_decision', args=[budget_request.pk]),
                              {'action': 'reject'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('note', response.json()['details'])

    def test_past_needed_by_is_invalid(self) -> None:
        self.client.force_login(self.civitas)
        yesterday = timezone.localdate() - timedelta(days=1)

        response = self._post(reverse('budgeting:request_list'), {
            'title': 'Kertas HVS',
            'amount_requested': 100000,
            'needed_by': yesterday.isoformat(),
        })

        self.assertEqual(response.status_code, 400)
        self.assertIn('needed_by', response.json()['details'])

    def test_other_users_request_is_forbidden(self) -> None:
        budget_request = self.make_request(owner=self.other_civitas)
        self.client.force_login(self.civitas)

        response = self.client.get(reverse('budgeting:request_detail', args=[budget_request.pk]))

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error_code'], 'ERR_NOT_OWNER')

    def test_patch_updates_only_sent_fields(self) -> None:
        budget_request = self.make_request(description='Untuk kegiatan belajar kelas 5')
        self.client.force_login(self.civitas)

        response = self.client.patch(
            reverse('budgeting:request_detail', args=[budget_request.pk]),
            data=json.dumps({'amount_requested': 350000}),
            content_type='application/json'
        )

        self.assertEqual(response.status_code, 200)
        budget_request.refresh_from_db()
        self.assertEqual(budget_request.amount_requested, 350000)
        self.assertEqual(budget_request.description, 'Untuk kegiatan belajar kelas 5')

    def test_submit_endpoint_rejects_lapsed_needed_by(self) -> None:
        draft = self.make_request(
            status=RequestStatus.DRAFT,
            needed_by=timezone.localdate() + timedelta(days=1)
        )
        BudgetRequest.objects.filter(pk=draft.pk).update(
            needed_by=timezone.localdate() - timedelta(days=3)
        )
        self.client.force_login(self.civitas)

        response = self.client.post(reverse('budgeting:request_submit', args=[draft.pk]))

        self.assertEqual(response.status_code, 400)
        self.assertIn('needed_by', response.json()['details'])
        draft.refresh_from_db()
        self.assertEqual(draft.status, RequestStatus.DRAFT)

    def test_delete_draft_only(self) -> None:
        draft = self.make_request(status=RequestStatus.DRAFT)
        submitted = self.make_request()
        self.client.force_login(self.civitas)

        self.assertEqual(self.client.delete(reverse('budgeting:request_detail', args=[draft.pk])).status_code, 200)
        self.assertEqual(self.client.delete(reverse('budgeting:request_detail', args=[submitted.pk])).status_code, 409)
        self.assertFalse(BudgetRequest.objects.filter(pk=draft.pk).exists())

    def test_list_is_scoped_to_owner(self) -> None:
        self.make_request(title='Milik saya')
        self.make_request(title='Milik orang lain', owner=self.other_civitas)
        self.client.force_login(self.civitas)

        data = self.client.get(reverse('budgeting:request_list')).json()

        self.assertEqual(data['total'], 1)
        self.assertEqual(data['items'][0]['title'], 'Milik saya')

    def test_disburse_endpoint_reports_budget_exceeded(self) -> None:
        rkab = services_rkab.create_rkab(self.bendahara, 2026)
        budget_request = self.make_request(status=RequestStatus.APPROVED, amount=500_000)
        RkabItem.objects.create(rkab=rkab, budget_request=budget_request,
                                amount_allocated=500_000, used_amount=1)
        self.client.force_login(self.bendahara)

        response = self.client.post(reverse('budgeting:disburse', args=[budget_request.pk]))

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()['error_code'], 'ERR_BUDGET_EXCEEDED')
        self.assertEqual(LedgerEntry.objects.count(), 0)

    def test_proof_upload_endpoint(self) -> None:
        self.client.force_login(self.civitas)
        budget_request = self.make_request(status=RequestStatus.DISBURSED)
        store = RecordingFileStore()
        upload = SimpleUploadedFile('kuitansi.png', b'\x89PNG....', content_type='image/png')

        with mock.patch('apps.budgeting.services_proof.get_file_store', return_value=store):
            response = self.client.post(
                reverse('budgeting:request_proofs', args=[budget_request.pk]), {'file': upload}
            )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['proof']['file_name'], 'kuitansi.png')
        budget_request.refresh_from_db()
        self.assertEqual(budget_request.status, RequestStatus.COMPLETED)

    def test_rkab_endpoints(self) -> None:
        approved = self.make_request(status=RequestStatus.APPROVED, amount=300_000)
        self.client.force_login(self.bendahara)

        response = self._post(reverse('budgeting:rkab_list'), {'fiscal_year': 2026})
        self.assertEqual(response.status_code, 201)
        rkab_id = response.json()['rkab']['id']

        response = self._post(reverse('budgeting:rkab_items', args=[rkab_id]), {
            'items': [{'budget_request_id': approved.pk, 'amount_allocated': 0}],
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn('items[0]', response.json()['details'])

        response = self._post(reverse('budgeting:rkab_items', args=[rkab_id]), {
            'items': [{'budget_request_id': approved.pk, 'amount_allocated': 300000}],
        })
        self.assertEqual(response.status_code, 201)

        response = self.client.post(reverse('budgeting:rkab_submit', args=[rkab_id]))
        self.assertEqual(response.status_code, 200)

        self.client.force_login(self.kepsek)
        response = self._post(reverse('budgeting:rkab_decision', args=[rkab_id]), {'action': 'approve'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['rkab']['status'], RkabStatus.APPROVED)

        response = self.client.get(reverse('budgeting:rkab_realisasi'), {'fiscal_year': 2026})
        self.assertEqual(response.json()['percent'], 0)
