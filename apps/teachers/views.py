#apps/teachers/views.py:

import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import SearchFilter, OrderingFilter
from django.db.models import Count
from django.utils import timezone

from .models import DocentePeriodo
from .serializers import DocentePeriodoSerializer, DocentePeriodoListSerializer

logger = logging.getLogger(__name__)


class DocentePeriodoViewSet(viewsets.ModelViewSet):
    queryset = DocentePeriodo.objects.all()
    serializer_class = DocentePeriodoSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ['semestre', 'id_docente', 'programa', 'modalidad', 'rol_colaborador']
    search_fields = ['docente', 'id_docente']
    ordering_fields = ['docente', 'fecha_carga', 'promedio_esa']
    ordering = ['semestre', 'docente']

    def get_serializer_class(self):
        if self.action == 'list':
            return DocentePeriodoListSerializer
        return DocentePeriodoSerializer

    def get_queryset(self):
        queryset = super().get_queryset()

        # Solo la carga más reciente del semestre
        semestre = self.request.query_params.get('semestre')
        if semestre and self.request.query_params.get('ultima_carga') == 'true':
            queryset = queryset.ultima_carga(semestre)

        return queryset

    @action(detail=False, methods=['post'], url_path='carga-masiva')
    def carga_masiva(self, request):
        """Registrar una carga completa de docentes con una misma fecha de carga"""
        if not isinstance(request.data, list) or not request.data:
            return Response(
                {'message': 'El cuerpo de la petición debe ser un array de registros.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = DocentePeriodoSerializer(data=request.data, many=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        fecha_carga = timezone.now()
        registros = [
            DocentePeriodo(**{**item, 'fecha_carga': fecha_carga})
            for item in serializer.validated_data
        ]
        creados = DocentePeriodo.objects.bulk_create(registros)
        logger.info(f"Carga masiva de docentes: {len(creados)} registros")

        return Response({
            'message': f'{len(creados)} registros insertados.',
            'insertedCount': len(creados),
            'fecha_carga': fecha_carga
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def cargas(self, request):
        """Cargas registradas por semestre"""
        cargas = DocentePeriodo.objects.values('semestre', 'fecha_carga').annotate(
            total_docentes=Count('id')
        ).order_by('-fecha_carga')

        return Response(list(cargas))
