from django.contrib.auth.signals import user_login_failed, user_logged_in
from django.dispatch import receiver
import logging

logger = logging.getLogger(__name__)


@receiver(user_login_failed)
def log_failed_login(sender, credentials, request, **kwargs):
    """Log failed login attempts with the attempted email and client IP."""
    email = credentials.get('username') or credentials.get('email')

    ip = None
    if request is not None:
        ip = request.META.get('REMOTE_ADDR') or request.META.get('HTTP_X_FORWARDED_FOR')

    logger.warning(
        "Failed login attempt - email=%s ip=%s path=%s",
        email,
        ip,
        getattr(request, 'path', None)
    )


@receiver(user_logged_in)
def log_login(sender, request, user, **kwargs):
    logger.info("User logged in - email=%s role=%s", user.email, user.role)
