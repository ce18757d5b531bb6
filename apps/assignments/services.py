import logging
from collections import Counter
from contextlib import contextmanager

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from apps.teachers.models import DocentePeriodo
from apps.specialists.models import DisponibilidadAcompaniamiento
from apps.notifications.services import GeneradorNotificaciones
from .exceptions import SinDocentesError, MatchEnCursoError
from .matching import (
    IndiceDisponibilidad, IndiceAsignacionPrevia, resolver_docente, clasificar_cambio
)
from .models import (
    AsignacionEspecialistaDocente, HistorialAsignacion, EstadoGeneral, detalle_anterior_vacio
)

logger = logging.getLogger(__name__)

CAMPOS_DOCENTE = [
    'semestre', 'id_docente', 'docente', 'rol_colaborador', 'facultad',
    'programa', 'modalidad', 'promedio_esa', 'cursos',
]


@contextmanager
def bloqueo_semestre(semestre):
    """Evita dos ejecuciones simultáneas del match para el mismo semestre"""
    clave = f'match:{semestre}'
    if not cache.add(clave, timezone.now().isoformat(), timeout=settings.MATCHING['BLOQUEO_TIMEOUT']):
        raise MatchEnCursoError(semestre)
    try:
        yield
    finally:
        cache.delete(clave)


class FuentesMatch:
    """Lecturas que alimentan una ejecución del match"""

    @staticmethod
    def docentes(semestre):
        return list(DocentePeriodo.objects.ultima_carga(semestre).values(*CAMPOS_DOCENTE))

    @staticmethod
    def disponibilidades():
        return list(
            DisponibilidadAcompaniamiento.objects.order_by('id').values(
                'dni', 'apellidos_nombres_completos', 'disponibilidades'
            )
        )

    @staticmethod
    def asignaciones_previas(semestre):
        return list(
            AsignacionEspecialistaDocente.objects.filter(semestre=semestre)
            .order_by('-fecha_hora_ejecucion', 'id')
            .values('id_docente', 'especialista_dni', 'nombre_especialista', 'estado_general')
        )

    @classmethod
    def cargar(cls, semestre):
        # Las tres lecturas se completan antes de empezar a procesar
        return cls.docentes(semestre), cls.disponibilidades(), cls.asignaciones_previas(semestre)


class EscritorHistorial:
    """Guarda el snapshot completo y el historial de los cambios auditables"""

    @staticmethod
    def estados_auditables():
        return set(settings.MATCHING['ESTADOS_HISTORIAL'])

    @classmethod
    def guardar(cls, snapshots, registros):
        """
        Inserciones masivas independientes: si falla el historial, el snapshot
        ya insertado no se revierte.
        """
        auditables = cls.estados_auditables()
        historial = [r for r in registros if r.estado_cambio in auditables]

        creados = AsignacionEspecialistaDocente.objects.bulk_create(snapshots)
        logger.info(f"{len(creados)} snapshots de asignación insertados")

        guardados = HistorialAsignacion.objects.bulk_create(historial) if historial else []
        logger.info(f"{len(guardados)} registros de historial insertados")

        return creados, guardados


class ServicioMatch:
    """Servicio principal del match docente-especialista"""

    @staticmethod
    def construir_registros(docente, resultado, previo, estado_cambio, fecha_hora_ejecucion):
        """Snapshot y registro de cambio (sin guardar) de un docente"""
        especialista = resultado.especialista
        datos = {
            **{campo: docente.get(campo) for campo in CAMPOS_DOCENTE},
            'cursos': resultado.cursos,
            'especialista_dni': especialista.especialista_dni if especialista else None,
            'nombre_especialista': especialista.nombre_especialista if especialista else None,
            'estado_general': EstadoGeneral.PLANIFICADO if especialista else EstadoGeneral.SIN_ASIGNAR,
            'fecha_hora_ejecucion': fecha_hora_ejecucion,
        }
        for campo in ('rol_colaborador', 'facultad', 'programa', 'modalidad'):
            datos[campo] = datos[campo] or ''

        detalle_anterior = detalle_anterior_vacio()
        if previo is not None:
            detalle_anterior = {
                'especialista_dni': previo.especialista_dni,
                'nombre_especialista': previo.nombre_especialista,
            }

        snapshot = AsignacionEspecialistaDocente(**datos)
        registro = HistorialAsignacion(
            **datos,
            estado_cambio=estado_cambio,
            detalle_anterior=detalle_anterior
        )
        return snapshot, registro

    @classmethod
    def procesar_match(cls, semestre, fecha_hora_ejecucion=None):
        """Ejecuta el match del semestre y devuelve el resumen de la ejecución"""
        fecha_hora_ejecucion = fecha_hora_ejecucion or timezone.now()

        with bloqueo_semestre(semestre):
            docentes, disponibilidades, previas = FuentesMatch.cargar(semestre)
            logger.info(
                f"Match {semestre}: {len(docentes)} docentes, "
                f"{len(disponibilidades)} especialistas, {len(previas)} asignaciones previas"
            )

            if not docentes:
                raise SinDocentesError(semestre)

            indice_disponibilidad = IndiceDisponibilidad.construir(disponibilidades)
            indice_previo = IndiceAsignacionPrevia.construir(previas)

            snapshots = []
            registros = []
            for docente in docentes:
                previo = indice_previo.obtener(docente['id_docente'])
                resultado = resolver_docente(docente, indice_disponibilidad, previo)
                estado_cambio = clasificar_cambio(previo, resultado.especialista)

                snapshot, registro = cls.construir_registros(
                    docente, resultado, previo, estado_cambio, fecha_hora_ejecucion
                )
                snapshots.append(snapshot)
                registros.append(registro)

            _, historial = EscritorHistorial.guardar(snapshots, registros)
            notificaciones = GeneradorNotificaciones.generar(
                registros, persistidos=[h.pk for h in historial]
            )

        matches = sum(1 for s in snapshots if s.especialista_dni is not None)
        resumen = Counter(r.estado_cambio.value for r in registros)
        logger.info(f"Match {semestre} finalizado: {matches} con especialista, resumen {dict(resumen)}")

        return {
            'message': 'Proceso de match finalizado.',
            'totalProcesados': len(snapshots),
            'matches': matches,
            'sinMatch': len(snapshots) - matches,
            'resumen': dict(resumen),
            'historial': len(historial),
            'notificaciones': len(notificaciones),
            'fechaHoraEjecucion': fecha_hora_ejecucion,
        }
