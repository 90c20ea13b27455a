"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Forms for session login.
-------------------------------------------------------------------------
"""
from django.contrib.auth.forms import AuthenticationForm


class EmailAuthenticationForm(AuthenticationForm):
    """Authentication form that normalizes email input.

    Lower-cases and strips the `username` field (the email address) so
    users can log in regardless of letter case.
    """

    def clean_username(self):
        username = self.cleaned_data.get('username')
        if username:
            return username.strip().lower()
        return username
