#apps/assignments/views.py:

import logging
from collections import Counter

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import SearchFilter, OrderingFilter
from django.db import DatabaseError
from django.db.models import Count, Max
from django.utils import timezone
from django.utils.dateparse import parse_date

from core.utils import lista_param
from .exceptions import SinDocentesError, MatchEnCursoError
from .models import AsignacionEspecialistaDocente, HistorialAsignacion
from .serializers import (
    EjecutarMatchSerializer, AsignacionEspecialistaDocenteSerializer, HistorialAsignacionSerializer
)
from .services import ServicioMatch

logger = logging.getLogger(__name__)


def _filtrar_tiene_asignacion(queryset, valor):
    if valor == 'true':
        return queryset.filter(especialista_dni__isnull=False)
    if valor == 'false':
        return queryset.filter(especialista_dni__isnull=True)
    return queryset


class MatchViewSet(viewsets.GenericViewSet):
    """Ejecución del match docente-especialista"""
    serializer_class = EjecutarMatchSerializer

    def create(self, request):
        serializer = EjecutarMatchSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'message': 'El parámetro semestre es requerido y debe tener el formato "YYYY-N".',
                 'errors': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        semestre = serializer.validated_data['semestre']
        try:
            resultado = ServicioMatch.procesar_match(semestre)
        except SinDocentesError as e:
            return Response({
                'message': str(e),
                'totalProcesados': 0,
                'matches': 0,
                'sinMatch': 0
            }, status=status.HTTP_404_NOT_FOUND)
        except MatchEnCursoError as e:
            return Response({'message': str(e)}, status=status.HTTP_409_CONFLICT)
        except DatabaseError as e:
            logger.exception(f"Error al ejecutar el match del semestre {semestre}")
            return Response({
                'message': 'Error interno del servidor.',
                'error': str(e)
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(resultado, status=status.HTTP_201_CREATED)


class AsignacionEspecialistaDocenteViewSet(viewsets.ReadOnlyModelViewSet):
    """Snapshots de asignación generados por cada ejecución"""
    queryset = AsignacionEspecialistaDocente.objects.all()
    serializer_class = AsignacionEspecialistaDocenteSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ['semestre', 'id_docente', 'especialista_dni', 'estado_general']
    search_fields = ['docente', 'id_docente', 'nombre_especialista']
    ordering_fields = ['docente', 'fecha_hora_ejecucion']
    ordering = ['docente']

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        # Estado actual = última ejecución
        if params.get('latest') == 'true':
            queryset = queryset.de_ultima_ejecucion(params.get('semestre'))

        return _filtrar_tiene_asignacion(queryset, params.get('tiene_asignacion'))

    @action(detail=False, methods=['get'])
    def estadisticas(self, request):
        """Estadísticas de la última ejecución"""
        semestre = request.query_params.get('semestre')
        asignaciones = AsignacionEspecialistaDocente.objects.de_ultima_ejecucion(semestre)

        total = asignaciones.count()
        con_asignacion = asignaciones.filter(especialista_dni__isnull=False).count()
        especialistas = list(
            asignaciones.filter(especialista_dni__isnull=False)
            .values('especialista_dni')
            .annotate(
                nombre_especialista=Max('nombre_especialista'),
                total_docentes=Count('id_docente', distinct=True)
            )
            .order_by('-total_docentes', 'especialista_dni')
        )

        return Response({
            'semestre': semestre or 'todos',
            'fecha_hora_ejecucion': AsignacionEspecialistaDocente.objects.ultima_ejecucion(semestre),
            'estadisticas': {
                'total_docentes': total,
                'con_asignacion': con_asignacion,
                'sin_asignacion': total - con_asignacion,
                'porcentaje_con_asignacion': round(con_asignacion / total * 100, 2) if total else 0,
                'total_especialistas_activos': len(especialistas),
                'carga_promedio_por_especialista': (
                    round(con_asignacion / len(especialistas), 2) if especialistas else 0
                ),
                'top5_especialistas_mas_docentes': especialistas[:5],
            },
            'fecha_consulta': timezone.now()
        })

    @action(detail=False, methods=['get'], url_path='especialista/(?P<dni>[^/.]+)')
    def especialista(self, request, dni=None):
        """Docentes asignados a un especialista en la última ejecución"""
        semestre = request.query_params.get('semestre')
        asignaciones = AsignacionEspecialistaDocente.objects.de_ultima_ejecucion(semestre).filter(
            especialista_dni=dni
        ).order_by('docente')

        serializer = AsignacionEspecialistaDocenteSerializer(asignaciones, many=True)
        return Response({
            'especialista_dni': dni,
            'total_docentes': len(serializer.data),
            'asignaciones': serializer.data
        })


class HistorialAsignacionViewSet(viewsets.ReadOnlyModelViewSet):
    """Historial de cambios de asignación"""
    queryset = HistorialAsignacion.objects.all()
    serializer_class = HistorialAsignacionSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['semestre', 'id_docente', 'especialista_dni']
    ordering = ['-fecha_hora_ejecucion', 'id_docente']

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        if params.get('latest') == 'true':
            queryset = queryset.de_ultima_ejecucion(params.get('semestre'))

        if params.get('estado_cambio'):
            queryset = queryset.filter(estado_cambio__in=lista_param(params['estado_cambio']))

        queryset = _filtrar_tiene_asignacion(queryset, params.get('tiene_asignacion'))

        fecha_desde = parse_date(params.get('fecha_desde', '') or '')
        fecha_hasta = parse_date(params.get('fecha_hasta', '') or '')
        if fecha_desde:
            queryset = queryset.filter(fecha_hora_ejecucion__date__gte=fecha_desde)
        if fecha_hasta:
            queryset = queryset.filter(fecha_hora_ejecucion__date__lte=fecha_hasta)

        return queryset

    @action(detail=False, methods=['get'], url_path='especialista/(?P<dni>[^/.]+)')
    def especialista(self, request, dni=None):
        """Historial completo de un especialista"""
        historial = HistorialAsignacion.objects.filter(especialista_dni=dni)

        semestre = request.query_params.get('semestre')
        if semestre:
            historial = historial.filter(semestre=semestre)
        if request.query_params.get('estado_cambio'):
            historial = historial.filter(
                estado_cambio__in=lista_param(request.query_params['estado_cambio'])
            )

        registros = list(historial.order_by('-fecha_hora_ejecucion', 'id_docente'))
        return Response({
            'especialista_dni': dni,
            'nombre_especialista': registros[0].nombre_especialista if registros else None,
            'data': HistorialAsignacionSerializer(registros, many=True).data,
            'resumen': {
                'total_asignaciones': len(registros),
                'por_tipo_cambio': dict(Counter(r.estado_cambio for r in registros)),
                'docentes_unicos': len({r.id_docente for r in registros}),
                'semestres': sorted({r.semestre for r in registros}),
            }
        })

    @action(detail=False, methods=['get'])
    def resumen(self, request):
        """Resumen estadístico del historial"""
        historial = HistorialAsignacion.objects.all()
        semestre = request.query_params.get('semestre')
        if semestre:
            historial = historial.filter(semestre=semestre)

        por_tipo = historial.values('estado_cambio').annotate(total=Count('id')).order_by()

        return Response({
            'total_registros': historial.count(),
            'por_tipo_cambio': {item['estado_cambio']: item['total'] for item in por_tipo},
            'especialistas_unicos': historial.exclude(especialista_dni__isnull=True)
                .values('especialista_dni').order_by().distinct().count(),
            'docentes_unicos': historial.values('id_docente').order_by().distinct().count(),
            'semestres': sorted(set(historial.values_list('semestre', flat=True))),
            'ultima_ejecucion': historial.ultima_ejecucion(),
        })
