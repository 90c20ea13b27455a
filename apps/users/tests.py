"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Tests for session login, identity and role helpers.
-------------------------------------------------------------------------
"""
import json
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, Client
from django.urls import reverse

from apps.core.exceptions import NotOwnerException
from apps.users.models import UserRole
from apps.users.permissions import check_ownership, has_role

User = get_user_model()


class AuthAPITests(TestCase):
    """Tests for the login, logout and me endpoints."""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            email='bendahara@example.com',
            password='testpass123',
            name='Bambang Bendahara',
            role=UserRole.BENDAHARA
        )

    def _login(self, email: str, password: str):
        return self.client.post(
            reverse('users:login'),
            data=json.dumps({'email': email, 'password': password}),
            content_type='application/json'
        )

    def test_login_with_valid_credentials(self) -> None:
        """Login returns the user identity and starts a session."""
        response = self._login('bendahara@example.com', 'testpass123')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['user']['role'], UserRole.BENDAHARA)

        me = self.client.get(reverse('users:me'))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['user']['email'], 'bendahara@example.com')

    def test_login_email_is_case_insensitive(self) -> None:
        response = self._login('  Bendahara@Example.COM ', 'testpass123')

        self.assertEqual(response.status_code, 200)

    def test_login_with_wrong_password(self) -> None:
        response = self._login('bendahara@example.com', 'wrong-password')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_VALIDATION')

    def test_inactive_user_cannot_login(self) -> None:
        self.user.is_active = False
        self.user.save()

        response = self._login('bendahara@example.com', 'testpass123')

        self.assertEqual(response.status_code, 400)

    def test_logout_ends_session(self) -> None:
        self.client.force_login(self.user)

        response = self.client.post(reverse('users:logout'))
        self.assertEqual(response.status_code, 200)

        self.assertEqual(self.client.get(reverse('users:me')).status_code, 401)


class RoleHelperTests(TestCase):
    """Tests for role and ownership checks."""

    def setUp(self):
        self.kepsek = User.objects.create_user(
            email='kepsek@example.com',
            password='testpass123',
            name='Kartini Kepsek',
            role=UserRole.KEPSEK
        )

    def test_has_role(self) -> None:
        self.assertTrue(has_role(self.kepsek, [UserRole.KEPSEK]))
        self.assertTrue(has_role(self.kepsek, [UserRole.BENDAHARA, UserRole.KEPSEK]))
        self.assertFalse(has_role(self.kepsek, [UserRole.CIVITAS]))

    def test_inactive_user_has_no_role(self) -> None:
        self.kepsek.is_active = False
        self.assertFalse(has_role(self.kepsek, [UserRole.KEPSEK]))

    def test_check_ownership(self) -> None:
        check_ownership(5, 5)
        with self.assertRaises(NotOwnerException):
            check_ownership(5, 6)

    def test_create_user_lowercases_email(self) -> None:
        user = User.objects.create_user(email='Guru@Example.com', password='x', name='Guru')
        self.assertEqual(user.email, 'guru@example.com')
        self.assertEqual(user.role, UserRole.CIVITAS)


class SeedUsersCommandTests(TestCase):

    def test_seed_users_is_idempotent(self) -> None:
        """Running the command twice creates each demo user once."""
        call_command('seed_users', stdout=StringIO())
        call_command('seed_users', stdout=StringIO())

        self.assertEqual(User.objects.count(), 3)
        kepsek = User.objects.get(email='kepsek@demo.id')
        self.assertEqual(kepsek.role, UserRole.KEPSEK)
        self.assertTrue(kepsek.check_password('password123'))
