from rest_framework import serializers

from apps.teachers.models import semestre_validator
from .models import AsignacionEspecialistaDocente, HistorialAsignacion


class EjecutarMatchSerializer(serializers.Serializer):
    """Parámetros para ejecutar el match de un semestre"""
    semestre = serializers.CharField(max_length=6, validators=[semestre_validator])


class AsignacionEspecialistaDocenteSerializer(serializers.ModelSerializer):
    tiene_asignacion = serializers.BooleanField(read_only=True)

    class Meta:
        model = AsignacionEspecialistaDocente
        fields = '__all__'


class HistorialAsignacionSerializer(serializers.ModelSerializer):
    estado_cambio_display = serializers.CharField(source='get_estado_cambio_display', read_only=True)

    class Meta:
        model = HistorialAsignacion
        fields = '__all__'
