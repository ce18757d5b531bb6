import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import SearchFilter, OrderingFilter

from .models import DisponibilidadAcompaniamiento
from .serializers import DisponibilidadAcompaniamientoSerializer

logger = logging.getLogger(__name__)


class DisponibilidadAcompaniamientoViewSet(viewsets.ModelViewSet):
    queryset = DisponibilidadAcompaniamiento.objects.all()
    serializer_class = DisponibilidadAcompaniamientoSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ['dni']
    search_fields = ['apellidos_nombres_completos', 'dni']
    ordering = ['apellidos_nombres_completos']

    @action(detail=False, methods=['post'], url_path='carga-masiva')
    def carga_masiva(self, request):
        """Registrar disponibilidades de varios especialistas"""
        if not isinstance(request.data, list) or not request.data:
            return Response(
                {'message': 'El cuerpo de la solicitud debe ser un array de registros y no puede estar vacío.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = DisponibilidadAcompaniamientoSerializer(data=request.data, many=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        # bulk_create no pasa por save(): el DNI ya viene normalizado del serializer
        creados = DisponibilidadAcompaniamiento.objects.bulk_create([
            DisponibilidadAcompaniamiento(**item) for item in serializer.validated_data
        ])
        logger.info(f"Carga masiva de disponibilidad: {len(creados)} especialistas")

        return Response({
            'message': f'{len(creados)} registros de disponibilidad insertados.',
            'insertedCount': len(creados)
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='especialista/(?P<dni>[^/.]+)')
    def especialista(self, request, dni=None):
        """Franjas disponibles de un especialista"""
        registros = DisponibilidadAcompaniamiento.objects.filter(dni=str(dni).strip())
        if not registros.exists():
            return Response({'error': 'Especialista no encontrado'}, status=status.HTTP_404_NOT_FOUND)

        franjas = []
        for registro in registros:
            franjas.extend(registro.disponibilidades or [])

        return Response({
            'dni': registros[0].dni,
            'nombre': registros[0].apellidos_nombres_completos,
            'total_franjas': len(franjas),
            'disponibilidades': franjas
        })
