"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Custom User model with role-based access control (RBAC).
             Each user carries exactly one of the three school roles:
             Civitas (requester), Bendahara (treasurer) and Kepsek
             (principal/approver).
-------------------------------------------------------------------------
"""
from typing import Optional, Iterable
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserRole(models.TextChoices):
    """
    Enumeration of user roles in the school finance workflow.

    - Civitas: Submits budget requests and uploads proof of usage
    - Bendahara: Records ledger entries, disburses funds, builds RKAS
    - Kepsek: Approves or rejects requests and RKAS plans
    """

    CIVITAS = 'CIVITAS', _('Civitas')
    BENDAHARA = 'BENDAHARA', _('Bendahara')
    KEPSEK = 'KEPSEK', _('Kepala Sekolah')


class CustomUserManager(BaseUserManager):
    """
    Custom manager for CustomUser model.

    Users log in with their email address instead of a username.
    """

    use_in_migrations = True

    def create_user(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields
    ) -> 'CustomUser':
        """
        Create and return a regular user.

        Args:
            email: User's email address (login identifier).
            password: User's password.
            **extra_fields: Additional fields for the user model.

        Returns:
            The created CustomUser instance.

        Raises:
            ValueError: If email is not provided.
        """
        if not email:
            raise ValueError(_('Email is required for user creation.'))

        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields
    ) -> 'CustomUser':
        """Create and return a superuser."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Custom User model for SIKAS.

    Uses the email address as the unique identifier instead of a
    username and holds a single role.

    Attributes:
        name: Display name.
        email: Unique login email.
        role: The user's role in the school finance workflow.
    """

    # Remove username and split name fields, use email + name instead
    username = None
    first_name = None
    last_name = None

    name = models.CharField(
        max_length=150,
        verbose_name=_('Name')
    )
    email = models.EmailField(
        unique=True,
        verbose_name=_('Email Address')
    )
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.CIVITAS,
        verbose_name=_('Role')
    )

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        ordering = ['name']

    def __str__(self) -> str:
        """Return user's name and role."""
        return f"{self.name} ({self.get_role_display()})"

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name.split(' ')[0] if self.name else self.email

    def has_role(self, role_code: str) -> bool:
        """Check if user has a specific role code."""
        return self.role == role_code

    def has_any_role(self, role_codes: Iterable[str]) -> bool:
        """Check if user has any of the specified role codes."""
        return self.role in set(role_codes)

    def is_civitas(self) -> bool:
        return self.role == UserRole.CIVITAS

    def is_bendahara(self) -> bool:
        return self.role == UserRole.BENDAHARA

    def is_kepsek(self) -> bool:
        return self.role == UserRole.KEPSEK
