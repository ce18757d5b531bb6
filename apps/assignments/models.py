#apps/assignments/models.py:

import uuid

from django.db import models
from django.db.models import Max

ESTADO_PLANIFICADO = 'Planificado'
ESTADO_SIN_ASIGNAR = 'Sin Asignar'


class EstadoGeneral(models.TextChoices):
    PLANIFICADO = ESTADO_PLANIFICADO, 'Planificado'
    SIN_ASIGNAR = ESTADO_SIN_ASIGNAR, 'Sin Asignar'


class EstadoCambio(models.TextChoices):
    ASIGNACION_NUEVA = 'ASIGNACION_NUEVA', 'Asignación nueva'
    REASIGNADO = 'REASIGNADO', 'Reasignado'
    MANTENIDO = 'MANTENIDO', 'Mantenido'
    DESASIGNADO = 'DESASIGNADO', 'Desasignado'
    PERMANECE_SIN_ASIGNAR = 'PERMANECE_SIN_ASIGNAR', 'Permanece sin asignar'


def detalle_anterior_vacio():
    return {'especialista_dni': None, 'nombre_especialista': None}


class EjecucionQuerySet(models.QuerySet):

    def ultima_ejecucion(self, semestre=None):
        queryset = self.filter(semestre=semestre) if semestre else self
        return queryset.aggregate(ultima=Max('fecha_hora_ejecucion'))['ultima']

    def de_ultima_ejecucion(self, semestre=None):
        """Registros generados por la ejecución más reciente"""
        fecha = self.ultima_ejecucion(semestre)
        if fecha is None:
            return self.none()
        queryset = self.filter(fecha_hora_ejecucion=fecha)
        return queryset.filter(semestre=semestre) if semestre else queryset


class SnapshotAsignacion(models.Model):
    """Estado de la asignación de un docente en una ejecución del match"""
    semestre = models.CharField(max_length=6, db_index=True)
    id_docente = models.CharField(max_length=20, db_index=True)
    docente = models.CharField(max_length=150)
    rol_colaborador = models.CharField(max_length=150, blank=True, default='')
    facultad = models.CharField(max_length=150, blank=True, default='')
    programa = models.CharField(max_length=50, blank=True, default='')
    modalidad = models.CharField(max_length=50, blank=True, default='')
    promedio_esa = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    especialista_dni = models.CharField(max_length=20, null=True, blank=True, db_index=True)
    nombre_especialista = models.CharField(max_length=150, null=True, blank=True)

    cursos = models.JSONField(default=list, help_text="Cursos con horarios enriquecidos con el acompañamiento")
    estado_general = models.CharField(max_length=20, choices=EstadoGeneral.choices)
    fecha_hora_ejecucion = models.DateTimeField(db_index=True)

    objects = EjecucionQuerySet.as_manager()

    class Meta:
        abstract = True

    @property
    def tiene_asignacion(self):
        return self.especialista_dni is not None


class AsignacionEspecialistaDocente(SnapshotAsignacion):
    """Una fila por docente y ejecución; nunca se actualiza"""

    class Meta:
        db_table = 'asignacion_especialista_docente'
        verbose_name = 'Asignación Especialista-Docente'
        verbose_name_plural = 'Asignaciones Especialista-Docente'
        constraints = [
            models.UniqueConstraint(
                fields=['id_docente', 'especialista_dni', 'semestre', 'fecha_hora_ejecucion'],
                name='asignacion_unica_por_ejecucion'
            ),
        ]
        indexes = [
            models.Index(fields=['semestre', '-fecha_hora_ejecucion'], name='asignacion_semestre_ejec_idx'),
        ]

    def __str__(self):
        especialista = self.nombre_especialista or ESTADO_SIN_ASIGNAR
        return f"{self.docente} - {especialista} ({self.semestre})"


class HistorialAsignacion(SnapshotAsignacion):
    """Snapshot de un cambio de asignación que se decidió auditar"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    estado_cambio = models.CharField(max_length=25, choices=EstadoCambio.choices, db_index=True)
    detalle_anterior = models.JSONField(default=detalle_anterior_vacio)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'historial_asignacion'
        verbose_name = 'Historial de Asignación'
        verbose_name_plural = 'Historial de Asignaciones'
        ordering = ['-fecha_hora_ejecucion', 'id_docente']

    def __str__(self):
        return f"{self.docente} - {self.get_estado_cambio_display()} ({self.fecha_hora_ejecucion})"

    def save(self, *args, **kwargs):
        if not self.detalle_anterior:
            self.detalle_anterior = detalle_anterior_vacio()
        super().save(*args, **kwargs)

    @property
    def especialista_anterior_dni(self):
        return (self.detalle_anterior or {}).get('especialista_dni')

    @property
    def especialista_anterior_nombre(self):
        return (self.detalle_anterior or {}).get('nombre_especialista')
