"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Root URL configuration. Every JSON endpoint lives under
             /api/; uploaded proofs are served from MEDIA_URL in DEBUG.
-------------------------------------------------------------------------
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('apps.users.urls')),
    path('api/', include('apps.budgeting.urls')),
    path('api/', include('apps.finance.urls')),
    path('api/reports/', include('apps.reporting.urls')),
    path('api/dashboard/', include('apps.dashboard.urls')),
]

urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
