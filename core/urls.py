# core/urls.py
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # API endpoints
    path('api/teachers/', include('apps.teachers.urls')),
    path('api/specialists/', include('apps.specialists.urls')),
    path('api/assignments/', include('apps.assignments.urls')),
    path('api/notifications/', include('apps.notifications.urls')),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
