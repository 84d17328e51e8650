"""
URL configuration for the coffee chat booking site.
"""
from django.contrib import admin
from django.conf import settings
from django.conf.urls.static import static
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('', include('apps.accounts.urls', namespace='accounts')),
    path('', include('apps.pages.urls', namespace='pages')),
    path('', include('apps.bookings.urls', namespace='bookings')),
    path('admin/', include('apps.dashboard.urls', namespace='dashboard')),
]

# Custom Error Handlers
handler404 = 'apps.pages.views.error_404'
handler500 = 'apps.pages.views.error_500'
handler403 = 'apps.pages.views.error_403'

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
