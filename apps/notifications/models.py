#apps/notifications/models.py:

import uuid

from django.db import models
from django.db.models import Count
from django.utils import timezone


class TipoNotificacion(models.TextChoices):
    NUEVA_ASIGNACION = 'NUEVA_ASIGNACION', 'Nueva asignación'
    REASIGNACION_GANADA = 'REASIGNACION_GANADA', 'Reasignación ganada'
    REASIGNACION_PERDIDA = 'REASIGNACION_PERDIDA', 'Reasignación perdida'
    DESASIGNACION = 'DESASIGNACION', 'Desasignación'


class EstadoNotificacion(models.TextChoices):
    NO_LEIDA = 'NO_LEIDA', 'No leída'
    VISTA = 'VISTA', 'Vista'
    LEIDA = 'LEIDA', 'Leída'
    ARCHIVADA = 'ARCHIVADA', 'Archivada'


class Prioridad(models.TextChoices):
    BAJA = 'BAJA', 'Baja'
    MEDIA = 'MEDIA', 'Media'
    ALTA = 'ALTA', 'Alta'


PRIORIDAD_POR_TIPO = {
    TipoNotificacion.NUEVA_ASIGNACION: Prioridad.ALTA,
    TipoNotificacion.REASIGNACION_GANADA: Prioridad.ALTA,
    TipoNotificacion.REASIGNACION_PERDIDA: Prioridad.MEDIA,
    TipoNotificacion.DESASIGNACION: Prioridad.ALTA,
}


def prioridad_para(tipo_notificacion):
    return PRIORIDAD_POR_TIPO.get(tipo_notificacion, Prioridad.MEDIA)


def metadata_por_defecto():
    return {'docentes_afectados_en_ejecucion': 1, 'es_reasignacion_masiva': False}


class NotificacionEspecialista(models.Model):
    """Aviso a un especialista sobre un cambio en sus asignaciones"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    historial = models.ForeignKey(
        'assignments.HistorialAsignacion',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notificaciones'
    )
    especialista_dni = models.CharField(max_length=20, db_index=True)
    nombre_especialista = models.CharField(max_length=150, blank=True, default='')
    tipo_notificacion = models.CharField(max_length=25, choices=TipoNotificacion.choices, db_index=True)
    estado = models.CharField(
        max_length=10,
        choices=EstadoNotificacion.choices,
        default=EstadoNotificacion.NO_LEIDA,
        db_index=True
    )
    prioridad = models.CharField(max_length=5, choices=Prioridad.choices, default=Prioridad.MEDIA)

    # Datos del cambio denormalizados para mostrar la notificación
    detalles_cambio = models.JSONField(default=dict)
    metadata = models.JSONField(default=metadata_por_defecto)

    fecha_vista = models.DateTimeField(null=True, blank=True)
    fecha_lectura = models.DateTimeField(null=True, blank=True)
    fecha_archivado = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notificacion_especialista'
        verbose_name = 'Notificación de Especialista'
        verbose_name_plural = 'Notificaciones de Especialistas'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['especialista_dni', 'estado'], name='notif_especialista_estado_idx'),
            models.Index(fields=['tipo_notificacion', 'estado'], name='notif_tipo_estado_idx'),
        ]

    def __str__(self):
        return f"{self.nombre_especialista} - {self.get_tipo_notificacion_display()} ({self.get_estado_display()})"

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.prioridad = prioridad_para(self.tipo_notificacion)
        super().save(*args, **kwargs)

    def marcar_como_vista(self):
        if self.estado == EstadoNotificacion.NO_LEIDA:
            self.estado = EstadoNotificacion.VISTA
            self.fecha_vista = timezone.now()
            self.save(update_fields=['estado', 'fecha_vista', 'updated_at'])
        return self

    def marcar_como_leida(self):
        """Una notificación leída conserva su fecha de lectura; una archivada no vuelve a leída"""
        if self.estado in (EstadoNotificacion.LEIDA, EstadoNotificacion.ARCHIVADA):
            return self
        ahora = timezone.now()
        self.estado = EstadoNotificacion.LEIDA
        self.fecha_vista = self.fecha_vista or ahora
        self.fecha_lectura = ahora
        self.save(update_fields=['estado', 'fecha_vista', 'fecha_lectura', 'updated_at'])
        return self

    def archivar(self):
        self.estado = EstadoNotificacion.ARCHIVADA
        self.fecha_archivado = timezone.now()
        self.save(update_fields=['estado', 'fecha_archivado', 'updated_at'])
        return self

    @classmethod
    def resumen_especialista(cls, especialista_dni):
        """Cantidad de notificaciones del especialista por estado"""
        conteos = dict(
            cls.objects.filter(especialista_dni=especialista_dni)
            .values_list('estado')
            .annotate(total=Count('id'))
            .order_by()
        )
        return {
            'no_leidas': conteos.get(EstadoNotificacion.NO_LEIDA, 0),
            'vistas': conteos.get(EstadoNotificacion.VISTA, 0),
            'leidas': conteos.get(EstadoNotificacion.LEIDA, 0),
            'archivadas': conteos.get(EstadoNotificacion.ARCHIVADA, 0),
            'total': sum(conteos.values()),
        }
