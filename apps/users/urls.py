"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: URL routing for session authentication endpoints.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.users.views import LoginAPIView, LogoutAPIView, MeAPIView

app_name = 'users'

urlpatterns = [
    path('login/', LoginAPIView.as_view(), name='login'),
    path('logout/', LogoutAPIView.as_view(), name='logout'),
    path('me/', MeAPIView.as_view(), name='me'),
]
