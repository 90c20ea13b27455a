"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: URL routing for the role dashboards.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.dashboard.views import BendaharaDashboardView, CivitasDashboardView, KepsekDashboardView

app_name = 'dashboard'

urlpatterns = [
    path('civitas/', CivitasDashboardView.as_view(), name='civitas'),
    path('bendahara/', BendaharaDashboardView.as_view(), name='bendahara'),
    path('kepsek/', KepsekDashboardView.as_view(), name='kepsek'),
]
