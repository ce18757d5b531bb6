from rest_framework import serializers
from .models import DisponibilidadAcompaniamiento


class FranjaDisponibleSerializer(serializers.Serializer):
    dia = serializers.CharField()
    sede = serializers.CharField()
    franja = serializers.CharField()
    turno = serializers.CharField(required=False, allow_blank=True)


class DisponibilidadAcompaniamientoSerializer(serializers.ModelSerializer):
    disponibilidades = FranjaDisponibleSerializer(many=True)
    total_franjas = serializers.SerializerMethodField()

    class Meta:
        model = DisponibilidadAcompaniamiento
        fields = '__all__'
        read_only_fields = ['created_at', 'updated_at']

    def get_total_franjas(self, obj):
        return len(obj.disponibilidades or [])

    def validate_dni(self, value):
        # Las cargas mezclan DNI numéricos y de texto para la misma persona
        return str(value).strip()

    def create(self, validated_data):
        return DisponibilidadAcompaniamiento.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance
