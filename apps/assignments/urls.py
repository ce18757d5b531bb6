#apps/assignments/urls.py:

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'match', views.MatchViewSet, basename='match')
router.register(r'asignaciones', views.AsignacionEspecialistaDocenteViewSet)
router.register(r'historial', views.HistorialAsignacionViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
