"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Session login, logout and identity endpoints.
-------------------------------------------------------------------------
"""
from django.contrib.auth import login, logout
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import ensure_csrf_cookie

from apps.core.api import APIView, parse_json
from apps.core.exceptions import ValidationFailedException
from apps.users.forms import EmailAuthenticationForm


def serialize_user(user) -> dict:
    return {
        'id': user.pk,
        'name': user.name,
        'email': user.email,
        'role': user.role,
    }


class LoginAPIView(APIView):
    """Authenticate with email + password and start a session."""

    def check_access(self, request) -> None:
        """Login is the one endpoint open to anonymous users."""

    def post(self, request):
        data = parse_json(request)
        form = EmailAuthenticationForm(request, data={
            'username': data.get('email', ''),
            'password': data.get('password', ''),
        })
        if not form.is_valid():
            errors = {field: [str(m) for m in messages] for field, messages in form.errors.items()}
            raise ValidationFailedException("Invalid email or password.", details=errors)

        user = form.get_user()
        login(request, user)
        return JsonResponse({'user': serialize_user(user)})


class LogoutAPIView(APIView):
    """End the current session."""

    def post(self, request):
        logout(request)
        return JsonResponse({'success': True})


@method_decorator(ensure_csrf_cookie, name='dispatch')
class MeAPIView(APIView):
    """Return the session user's identity and role."""

    def get(self, request):
        return JsonResponse({'user': serialize_user(request.user)})
