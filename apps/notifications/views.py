#apps/notifications/views.py:

import logging
from datetime import timedelta

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import OrderingFilter
from django.conf import settings
from django.db.models import Count
from django.utils import timezone

from core.utils import lista_param
from .models import NotificacionEspecialista, EstadoNotificacion
from .serializers import NotificacionEspecialistaSerializer, LimpiarNotificacionesSerializer

logger = logging.getLogger(__name__)


class NotificacionEspecialistaViewSet(viewsets.ReadOnlyModelViewSet):
    """Notificaciones generadas por las ejecuciones del match"""
    queryset = NotificacionEspecialista.objects.all()
    serializer_class = NotificacionEspecialistaSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['especialista_dni', 'estado', 'tipo_notificacion', 'prioridad']
    ordering_fields = ['created_at', 'prioridad']
    ordering = ['-created_at']

    @action(detail=False, methods=['get'], url_path='especialista/(?P<dni>[^/.]+)')
    def especialista(self, request, dni=None):
        """Notificaciones de un especialista"""
        notificaciones = NotificacionEspecialista.objects.filter(especialista_dni=dni)

        estado = request.query_params.get('estado')
        if estado:
            notificaciones = notificaciones.filter(estado__in=lista_param(estado))
        tipo = request.query_params.get('tipo_notificacion')
        if tipo:
            notificaciones = notificaciones.filter(tipo_notificacion__in=lista_param(tipo))

        serializer = NotificacionEspecialistaSerializer(notificaciones.order_by('-created_at'), many=True)
        return Response({
            'especialista_dni': dni,
            'data': serializer.data,
            'resumen': NotificacionEspecialista.resumen_especialista(dni)
        })

    @action(detail=False, methods=['get'], url_path='especialista/(?P<dni>[^/.]+)/no-leidas')
    def no_leidas(self, request, dni=None):
        notificaciones = NotificacionEspecialista.objects.filter(
            especialista_dni=dni, estado=EstadoNotificacion.NO_LEIDA
        ).order_by('-created_at')

        serializer = NotificacionEspecialistaSerializer(notificaciones, many=True)
        return Response({
            'especialista_dni': dni,
            'total': len(serializer.data),
            'data': serializer.data
        })

    @action(detail=True, methods=['post'], url_path='marcar-vista')
    def marcar_vista(self, request, pk=None):
        notificacion = self.get_object().marcar_como_vista()
        return Response(NotificacionEspecialistaSerializer(notificacion).data)

    @action(detail=True, methods=['post'], url_path='marcar-leida')
    def marcar_leida(self, request, pk=None):
        notificacion = self.get_object().marcar_como_leida()
        return Response(NotificacionEspecialistaSerializer(notificacion).data)

    @action(detail=True, methods=['post'])
    def archivar(self, request, pk=None):
        notificacion = self.get_object().archivar()
        return Response(NotificacionEspecialistaSerializer(notificacion).data)

    @action(detail=False, methods=['post'], url_path='especialista/(?P<dni>[^/.]+)/marcar-todas-leidas')
    def marcar_todas_leidas(self, request, dni=None):
        """Marca como leídas todas las notificaciones pendientes del especialista"""
        ahora = timezone.now()
        pendientes = NotificacionEspecialista.objects.filter(
            especialista_dni=dni,
            estado__in=[EstadoNotificacion.NO_LEIDA, EstadoNotificacion.VISTA]
        )
        pendientes.filter(fecha_vista__isnull=True).update(fecha_vista=ahora)
        actualizadas = pendientes.update(
            estado=EstadoNotificacion.LEIDA,
            fecha_lectura=ahora,
            updated_at=ahora
        )

        return Response({
            'message': f'{actualizadas} notificaciones marcadas como leídas.',
            'actualizadas': actualizadas
        })

    @action(detail=False, methods=['post'])
    def limpiar(self, request):
        """Elimina notificaciones leídas o archivadas más antiguas que `dias`"""
        serializer = LimpiarNotificacionesSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        dias = serializer.validated_data.get('dias', settings.MATCHING['DIAS_RETENCION_NOTIFICACIONES'])
        limite = timezone.now() - timedelta(days=dias)

        eliminadas, _ = NotificacionEspecialista.objects.filter(
            estado__in=[EstadoNotificacion.LEIDA, EstadoNotificacion.ARCHIVADA],
            created_at__lt=limite
        ).delete()
        logger.info(f"{eliminadas} notificaciones anteriores a {limite:%Y-%m-%d} eliminadas")

        return Response({
            'message': f'{eliminadas} notificaciones eliminadas.',
            'eliminadas': eliminadas,
            'dias': dias
        })

    @action(detail=False, methods=['get'])
    def resumen(self, request):
        """Resumen de notificaciones por tipo, estado y prioridad"""
        notificaciones = NotificacionEspecialista.objects.all()
        if request.query_params.get('especialista_dni'):
            notificaciones = notificaciones.filter(especialista_dni=request.query_params['especialista_dni'])

        def _conteo(campo):
            filas = notificaciones.values(campo).annotate(total=Count('id')).order_by()
            return {fila[campo]: fila['total'] for fila in filas}

        return Response({
            'total': notificaciones.count(),
            'por_tipo': _conteo('tipo_notificacion'),
            'por_estado': _conteo('estado'),
            'por_prioridad': _conteo('prioridad'),
            'especialistas_notificados': notificaciones.values('especialista_dni').order_by().distinct().count(),
        })
