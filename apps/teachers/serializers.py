from rest_framework import serializers
from .models import DocentePeriodo


class HorarioSerializer(serializers.Serializer):
    """Bloque horario de un curso"""
    fecha_inicio = serializers.CharField(required=False, allow_blank=True)
    fecha_fin = serializers.CharField(required=False, allow_blank=True)
    dia = serializers.CharField(required=False, allow_blank=True)
    hora = serializers.CharField(required=False, allow_blank=True)
    turno = serializers.CharField(required=False, allow_blank=True)
    edificio = serializers.CharField(required=False, allow_blank=True)
    campus = serializers.CharField(required=False, allow_blank=True)
    aula = serializers.CharField(required=False, allow_blank=True)
    estado_historico = serializers.CharField(required=False, allow_blank=True)


class CursoSerializer(serializers.Serializer):
    nombre_curso = serializers.CharField(required=False, allow_blank=True)
    cod_curso = serializers.CharField(required=False, allow_blank=True)
    seccion = serializers.CharField(required=False, allow_blank=True)
    periodo = serializers.CharField(required=False, allow_blank=True)
    nrc = serializers.CharField(required=False, allow_blank=True)
    horarios = HorarioSerializer(many=True, required=False)


class DocentePeriodoSerializer(serializers.ModelSerializer):
    cursos = CursoSerializer(many=True, required=False)
    total_horarios = serializers.IntegerField(read_only=True)

    class Meta:
        model = DocentePeriodo
        fields = '__all__'
        read_only_fields = ['created_at', 'updated_at']

    def validate_id_docente(self, value):
        return str(value).strip()

    # Los cursos se guardan tal cual en el JSONField
    def create(self, validated_data):
        return DocentePeriodo.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class DocentePeriodoListSerializer(serializers.ModelSerializer):
    """Serializer liviano para listados, sin el detalle de cursos"""
    total_horarios = serializers.IntegerField(read_only=True)

    class Meta:
        model = DocentePeriodo
        exclude = ['cursos']
