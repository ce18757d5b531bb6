from rest_framework import serializers
from .models import NotificacionEspecialista


class NotificacionEspecialistaSerializer(serializers.ModelSerializer):
    tipo_notificacion_display = serializers.CharField(source='get_tipo_notificacion_display', read_only=True)
    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    prioridad_display = serializers.CharField(source='get_prioridad_display', read_only=True)

    class Meta:
        model = NotificacionEspecialista
        fields = '__all__'


class LimpiarNotificacionesSerializer(serializers.Serializer):
    dias = serializers.IntegerField(min_value=1, required=False)
