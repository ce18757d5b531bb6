import logging
from collections import Counter

from django.conf import settings

from apps.assignments.models import EstadoCambio
from .models import (
    NotificacionEspecialista, TipoNotificacion, EstadoNotificacion, prioridad_para
)

logger = logging.getLogger(__name__)


def _especialista(dni, nombre):
    return {'dni': dni, 'nombre': nombre}


class GeneradorNotificaciones:
    """Convierte los cambios de una ejecución del match en notificaciones por especialista"""

    @staticmethod
    def notificaciones_para(registro, historial=None):
        """
        Notificaciones (sin guardar) que corresponden a un registro de cambio.
        MANTENIDO y PERMANECE_SIN_ASIGNAR no notifican a nadie.
        """
        nuevo = _especialista(registro.especialista_dni, registro.nombre_especialista)
        anterior = _especialista(registro.especialista_anterior_dni, registro.especialista_anterior_nombre)
        ninguno = _especialista(None, None)

        # (destinatario, tipo, especialista del otro lado)
        destinos = []
        if registro.estado_cambio == EstadoCambio.ASIGNACION_NUEVA:
            destinos.append((nuevo, TipoNotificacion.NUEVA_ASIGNACION, ninguno))
        elif registro.estado_cambio == EstadoCambio.REASIGNADO:
            destinos.append((nuevo, TipoNotificacion.REASIGNACION_GANADA, anterior))
            destinos.append((anterior, TipoNotificacion.REASIGNACION_PERDIDA, nuevo))
        elif registro.estado_cambio == EstadoCambio.DESASIGNADO:
            destinos.append((anterior, TipoNotificacion.DESASIGNACION, anterior))

        notificaciones = []
        for destinatario, tipo, otro in destinos:
            if not destinatario['dni']:
                continue
            notificaciones.append(NotificacionEspecialista(
                historial=historial,
                especialista_dni=destinatario['dni'],
                nombre_especialista=destinatario['nombre'] or '',
                tipo_notificacion=tipo,
                estado=EstadoNotificacion.NO_LEIDA,
                prioridad=prioridad_para(tipo),
                detalles_cambio={
                    'semestre': registro.semestre,
                    'id_docente': registro.id_docente,
                    'nombre_docente': registro.docente,
                    'estado_cambio': registro.estado_cambio,
                    'fecha_hora_ejecucion': registro.fecha_hora_ejecucion.isoformat(),
                    'especialista_anterior': dict(otro),
                },
            ))
        return notificaciones

    @classmethod
    def generar(cls, registros, persistidos=()):
        """
        Genera e inserta las notificaciones de una ejecución.
        `registros` son los registros de cambio de todos los docentes procesados;
        los que están en `persistidos` (ids) quedan enlazados a su historial.
        """
        ids_persistidos = set(persistidos)
        logger.info(f"Generando notificaciones para {len(registros)} registros de cambio...")

        notificaciones = []
        for registro in registros:
            historial = registro if registro.pk in ids_persistidos else None
            notificaciones.extend(cls.notificaciones_para(registro, historial))

        if not notificaciones:
            return []

        cls._completar_metadata(notificaciones)
        creadas = NotificacionEspecialista.objects.bulk_create(notificaciones)

        resumen = Counter(n.tipo_notificacion for n in creadas)
        logger.info(f"{len(creadas)} notificaciones creadas. Resumen por tipo: {dict(resumen)}")
        return creadas

    @staticmethod
    def _completar_metadata(notificaciones):
        umbral = settings.MATCHING['UMBRAL_REASIGNACION_MASIVA']
        por_especialista = Counter(n.especialista_dni for n in notificaciones)
        perdidas = Counter(
            n.especialista_dni for n in notificaciones
            if n.tipo_notificacion == TipoNotificacion.REASIGNACION_PERDIDA
        )

        for notificacion in notificaciones:
            dni = notificacion.especialista_dni
            notificacion.metadata = {
                'docentes_afectados_en_ejecucion': por_especialista[dni],
                'es_reasignacion_masiva': perdidas[dni] >= umbral,
            }
