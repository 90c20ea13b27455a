"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Permission classes for role-based access control.
             One mixin, parameterized per view with the allowed roles,
             gates every API endpoint.
-------------------------------------------------------------------------
"""
from typing import Any, List

from django.http import HttpRequest

from apps.core.exceptions import UnauthorizedRoleException, NotOwnerException
from apps.users.models import UserRole


class RoleRequiredMixin:
    """
    Mixin for role-based API access control.

    Must precede ``apps.core.api.APIView`` in the bases. Subclasses define
    ``required_roles``; an authenticated user holding none of them gets a
    403 response.

    Attributes:
        required_roles: List of role codes that can access this view.
    """

    required_roles: List[str] = []

    def check_access(self, request: HttpRequest) -> None:
        super().check_access(request)
        if not has_role(request.user, self.required_roles):
            raise UnauthorizedRoleException(
                f"This action requires one of the following roles: {self.required_roles}"
            )


class CivitasRequiredMixin(RoleRequiredMixin):
    """Restricts access to Civitas (requesters)."""

    required_roles = [UserRole.CIVITAS]


class BendaharaRequiredMixin(RoleRequiredMixin):
    """Restricts access to the Bendahara (treasurer)."""

    required_roles = [UserRole.BENDAHARA]


class KepsekRequiredMixin(RoleRequiredMixin):
    """Restricts access to the Kepsek (principal)."""

    required_roles = [UserRole.KEPSEK]


class FinanceOverseerRequiredMixin(RoleRequiredMixin):
    """Bendahara or Kepsek; used for read-only RKAS and report views."""

    required_roles = [UserRole.BENDAHARA, UserRole.KEPSEK]


def has_role(user: Any, roles: List[str]) -> bool:
    """
    Check if user has any of the specified roles.

    Args:
        user: The user object to check.
        roles: List of role codes to check against.

    Returns:
        True if the user is authenticated, active and holds one of the roles.
    """
    if not user.is_authenticated or not user.is_active:
        return False
    return user.has_any_role(roles)


def check_ownership(owner_id: int, current_user_id: int, action: str = "modify") -> None:
    """
    Verify that the current user owns the resource.

    Raises:
        NotOwnerException: If the user is not the owner.
    """
    if owner_id != current_user_id:
        raise NotOwnerException(f"You can only {action} your own requests.")
