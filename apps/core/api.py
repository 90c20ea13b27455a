"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Base class and helpers for the JSON API views. Converts
             SIKAS exceptions into error responses with the matching
             HTTP status.
-------------------------------------------------------------------------
"""
import json
from typing import Any, Callable, Dict, Optional, Type

from django import forms
from django.core.exceptions import ValidationError
from django.db.models import Model, QuerySet
from django.http import HttpRequest, JsonResponse
from django.views import View

from apps.core.exceptions import (
    CsrfFailedException,
    SIKASException,
    UnauthenticatedException,
    ValidationFailedException,
    ResourceNotFoundException,
)
from apps.core.logging import AuditLogger


class APIView(View):
    """
    Base view for JSON endpoints.

    Every request must carry an authenticated session. Subclasses add
    further checks by overriding ``check_access`` (see
    ``apps.users.permissions.RoleRequiredMixin``). Domain exceptions raised
    by the handler are rendered as ``{"error_code", "message", "details"}``.
    """

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        try:
            self.check_access(request)
            return super().dispatch(request, *args, **kwargs)
        except ValidationError as error:
            return self.render_error(request, ValidationFailedException(details=validation_details(error)))
        except SIKASException as exc:
            return self.render_error(request, exc)

    def render_error(self, request: HttpRequest, exc: SIKASException) -> JsonResponse:
        context = {'path': request.path, 'user_id': request.user.pk}
        if exc.status_code >= 409:
            AuditLogger.log_workflow_error(self.__class__.__name__, exc.message, context)
        elif isinstance(exc, ValidationFailedException):
            AuditLogger.log_validation_error(self.__class__.__name__, exc.details, context)
        return JsonResponse(exc.to_dict(), status=exc.status_code)

    def check_access(self, request: HttpRequest) -> None:
        """Require an authenticated, active user."""
        if not request.user.is_authenticated:
            raise UnauthenticatedException()


def parse_json(request: HttpRequest) -> Dict[str, Any]:
    """
    Decode the request body as a JSON object.

    Raises:
        ValidationFailedException: If the body is not a JSON object.
    """
    try:
        data = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailedException("Request body must be valid JSON.")
    if not isinstance(data, dict):
        raise ValidationFailedException("Request body must be a JSON object.")
    return data


def validate_form(form_class: Type[forms.Form], data: Any, **kwargs) -> Dict[str, Any]:
    """
    Run a Django form over the given data and return its cleaned data.

    Raises:
        ValidationFailedException: With per-field messages in ``details``.
    """
    form = form_class(data=data, **kwargs)
    if not form.is_valid():
        errors = {field: [str(message) for message in messages]
                  for field, messages in form.errors.items()}
        raise ValidationFailedException(details=errors)
    return form.cleaned_data


def get_object_or_raise(source, message: Optional[str] = None, **lookup) -> Model:
    """
    Fetch a single object from a model or queryset.

    Raises:
        ResourceNotFoundException: If nothing matches the lookup.
    """
    queryset = source if isinstance(source, QuerySet) else source._default_manager.all()
    try:
        return queryset.get(**lookup)
    except queryset.model.DoesNotExist:
        raise ResourceNotFoundException(message)


def parse_positive_int(value: Optional[str], default: int, maximum: Optional[int] = None) -> int:
    """Parse a positive integer query parameter, falling back to default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        number = min(number, maximum)
    return number


def paginate(queryset: QuerySet, page: int, take: int) -> QuerySet:
    """Slice a queryset for 1-based page numbers."""
    offset = (page - 1) * take
    return queryset[offset:offset + take]


def validation_details(error: ValidationError) -> Dict[str, Any]:
    """Flatten a Django ValidationError into {field: [messages]}."""
    if hasattr(error, 'error_dict'):
        return {field: [str(m) for m in messages] for field, messages in error.message_dict.items()}
    return {'__all__': [str(m) for m in error.messages]}


def paginated(request: HttpRequest, queryset: QuerySet, serializer: Callable,
              default_limit: int = 10, max_limit: int = 50) -> Dict[str, Any]:
    """Serialize one page of a queryset using ``?page=`` and ``?limit=``."""
    page = parse_positive_int(request.GET.get('page'), 1)
    limit = parse_positive_int(request.GET.get('limit'), default_limit, maximum=max_limit)
    return {
        'items': [serializer(obj) for obj in paginate(queryset, page, limit)],
        'page': page,
        'limit': limit,
        'total': queryset.count(),
    }


def isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None


def csrf_failure(request: HttpRequest, reason: str = "") -> JsonResponse:
    """
    ``CSRF_FAILURE_VIEW``: keep CSRF rejections in the JSON error format.

    Anonymous callers get the usual 401; signed-in users get 403.
    """
    if request.user.is_authenticated:
        exc = CsrfFailedException(details={'csrf': [reason]})
    else:
        exc = UnauthenticatedException(details={'csrf': [reason]})
    return JsonResponse(exc.to_dict(), status=exc.status_code)
