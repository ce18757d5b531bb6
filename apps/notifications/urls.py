#apps/notifications/urls.py:

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'notificaciones', views.NotificacionEspecialistaViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
