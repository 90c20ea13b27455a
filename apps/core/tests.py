"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Unit tests for the core module - API base view, helpers,
             exceptions and the storage port.
-------------------------------------------------------------------------
"""
from django import forms
from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from django.core.files.storage import InMemoryStorage
from django.test import TestCase, Client, SimpleTestCase
from django.urls import reverse

from apps.core.api import parse_positive_int, validate_form
from apps.core.exceptions import (
    BudgetExceededException,
    ValidationFailedException,
    WorkflowTransitionException,
)
from apps.core.storage import FileStore
from apps.users.models import UserRole

User = get_user_model()


class _SampleForm(forms.Form):
    name = forms.CharField(min_length=3)


class ExceptionTests(SimpleTestCase):
    """Tests for the exception hierarchy."""

    def test_to_dict_uses_default_message(self) -> None:
        """Exceptions without a message fall back to the class default."""
        data = WorkflowTransitionException().to_dict()

        self.assertEqual(data['error_code'], 'ERR_INVALID_TRANSITION')
        self.assertEqual(data['message'], WorkflowTransitionException.default_message)
        self.assertEqual(data['details'], {})

    def test_status_codes(self) -> None:
        self.assertEqual(WorkflowTransitionException.status_code, 409)
        self.assertEqual(BudgetExceededException.status_code, 422)
        self.assertEqual(ValidationFailedException.status_code, 400)


class HelperTests(SimpleTestCase):
    """Tests for API helper functions."""

    def test_validate_form_returns_cleaned_data(self) -> None:
        self.assertEqual(validate_form(_SampleForm, {'name': 'Budi'}), {'name': 'Budi'})

    def test_validate_form_raises_with_field_details(self) -> None:
        """Invalid data raises with per-field messages."""
        with self.assertRaises(ValidationFailedException) as ctx:
            validate_form(_SampleForm, {'name': 'ab'})

        self.assertIn('name', ctx.exception.details)
        self.assertTrue(ctx.exception.details['name'])

    def test_parse_positive_int(self) -> None:
        self.assertEqual(parse_positive_int('7', 20), 7)
        self.assertEqual(parse_positive_int('abc', 20), 20)
        self.assertEqual(parse_positive_int('0', 20), 20)
        self.assertEqual(parse_positive_int(None, 20), 20)
        self.assertEqual(parse_positive_int('500', 20, maximum=50), 50)


class FileStoreTests(SimpleTestCase):
    """Tests for the storage port."""

    def setUp(self):
        self.store = FileStore(storage=InMemoryStorage())

    def test_put_get_delete(self) -> None:
        """Files can be written, read back and removed by key."""
        key = self.store.put('proofs/receipt.pdf', ContentFile(b'%PDF-1.4 test'))

        self.assertTrue(self.store.exists(key))
        with self.store.get(key) as handle:
            self.assertEqual(handle.read(), b'%PDF-1.4 test')

        self.store.delete(key)
        self.assertFalse(self.store.exists(key))

    def test_delete_missing_key_is_noop(self) -> None:
        self.store.delete('proofs/missing.png')
        self.assertFalse(self.store.exists('proofs/missing.png'))


class APIAccessTests(TestCase):
    """Tests for authentication and role gating on the API base view."""

    def setUp(self):
        self.client = Client()
        self.civitas = User.objects.create_user(
            email='civitas@example.com',
            password='testpass123',
            name='Citra Civitas',
            role=UserRole.CIVITAS
        )

    def test_anonymous_request_gets_401(self) -> None:
        response = self.client.get(reverse('users:me'))

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['error_code'], 'ERR_UNAUTHENTICATED')

    def test_wrong_role_gets_403(self) -> None:
        """A Civitas user cannot reach Bendahara endpoints."""
        self.client.force_login(self.civitas)

        response = self.client.get(reverse('budgeting:disbursement_list'))

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error_code'], 'ERR_UNAUTHORIZED_ROLE')

    def test_invalid_json_body_gets_400(self) -> None:
        self.client.force_login(self.civitas)

        response = self.client.post(
            reverse('budgeting:request_list'), data='not-json', content_type='application/json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_VALIDATION')


class CsrfFailureTests(TestCase):
    """CSRF rejections use the JSON error format."""

    def setUp(self):
        self.client = Client(enforce_csrf_checks=True)
        self.civitas = User.objects.create_user(
            email='civitas@example.com',
            password='testpass123',
            name='Citra Civitas',
            role=UserRole.CIVITAS
        )

    def test_anonymous_post_without_token_gets_json_401(self) -> None:
        response = self.client.post(
            reverse('budgeting:request_list'), data='{}', content_type='application/json'
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response['Content-Type'], 'application/json')
        self.assertEqual(response.json()['error_code'], 'ERR_UNAUTHENTICATED')
        self.assertIn('csrf', response.json()['details'])

    def test_signed_in_post_without_token_gets_json_403(self) -> None:
        self.client.force_login(self.civitas)

        response = self.client.post(
            reverse('budgeting:request_list'), data='{}', content_type='application/json'
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error_code'], 'ERR_CSRF_FAILED')

    def test_token_from_me_endpoint_is_accepted(self) -> None:
        """The cookie set by /api/auth/me/ lets the next write through."""
        self.client.force_login(self.civitas)
        self.client.get(reverse('users:me'))
        token = self.client.cookies['csrftoken'].value

        response = self.client.post(
            reverse('budgeting:request_list'),
            data='{"title": "Spidol papan tulis", "amount_requested": 50000}',
            content_type='application/json',
            HTTP_X_CSRFTOKEN=token
        )

        self.assertEqual(response.status_code, 201)
