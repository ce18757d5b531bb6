import pytest
from django.core.cache import cache

from apps.assignments.exceptions import MatchEnCursoError, SinDocentesError
from apps.assignments.models import (
    AsignacionEspecialistaDocente, EstadoCambio, HistorialAsignacion, ESTADO_PLANIFICADO, ESTADO_SIN_ASIGNAR
)
from apps.assignments.services import ServicioMatch
from apps.notifications.models import NotificacionEspecialista, TipoNotificacion
from apps.specialists.models import DisponibilidadAcompaniamiento
from factories import SEMESTRE, crear_docente, crear_especialista, curso, ejecucion, franja, horario

pytestmark = pytest.mark.django_db


def _run(hora: int) -> dict:
    return ServicioMatch.procesar_match(SEMESTRE, fecha_hora_ejecucion=ejecucion(hora))


def _snapshot(hora: int) -> AsignacionEspecialistaDocente:
    return AsignacionEspecialistaDocente.objects.get(id_docente="T1", fecha_hora_ejecucion=ejecucion(hora))


@pytest.fixture
def primera_ejecucion():
    crear_docente("T1")
    crear_especialista("11111111", "ESPECIALISTA UNO")
    return _run(8)


@pytest.fixture
def segunda_ejecucion(primera_ejecucion):
    return _run(9)


@pytest.fixture
def tercera_ejecucion(segunda_ejecucion):
    DisponibilidadAcompaniamiento.objects.filter(dni="11111111").delete()
    crear_especialista("22222222", "ESPECIALISTA DOS")
    return _run(10)


@pytest.fixture
def cuarta_ejecucion(tercera_ejecucion):
    DisponibilidadAcompaniamiento.objects.all().delete()
    return _run(11)


def test_first_run_is_a_new_assignment_without_history(primera_ejecucion) -> None:
    assert primera_ejecucion["totalProcesados"] == 1
    assert primera_ejecucion["matches"] == 1
    assert primera_ejecucion["sinMatch"] == 0
    assert primera_ejecucion["resumen"] == {EstadoCambio.ASIGNACION_NUEVA.value: 1}
    assert primera_ejecucion["historial"] == 0

    snapshot = _snapshot(8)
    assert snapshot.especialista_dni == "11111111"
    assert snapshot.estado_general == ESTADO_PLANIFICADO
    assert snapshot.cursos[0]["horarios"][0]["acompanamiento"]["especialista_dni"] == "11111111"
    assert HistorialAsignacion.objects.count() == 0

    (notificacion,) = NotificacionEspecialista.objects.all()
    assert notificacion.tipo_notificacion == TipoNotificacion.NUEVA_ASIGNACION
    assert notificacion.especialista_dni == "11111111"
    assert notificacion.historial is None
    assert notificacion.detalles_cambio["especialista_anterior"] == {"dni": None, "nombre": None}


def test_second_run_keeps_specialist_silently(segunda_ejecucion) -> None:
    assert segunda_ejecucion["resumen"] == {EstadoCambio.MANTENIDO.value: 1}
    assert segunda_ejecucion["notificaciones"] == 0
    assert _snapshot(9).especialista_dni == "11111111"
    assert AsignacionEspecialistaDocente.objects.count() == 2
    assert HistorialAsignacion.objects.count() == 0
    assert NotificacionEspecialista.objects.count() == 1


def test_third_run_reassigns_and_notifies_both_specialists(tercera_ejecucion) -> None:
    assert tercera_ejecucion["resumen"] == {EstadoCambio.REASIGNADO.value: 1}
    assert tercera_ejecucion["historial"] == 1
    assert tercera_ejecucion["notificaciones"] == 2

    (registro,) = HistorialAsignacion.objects.all()
    assert registro.estado_cambio == EstadoCambio.REASIGNADO
    assert registro.especialista_dni == "22222222"
    assert registro.detalle_anterior == {"especialista_dni": "11111111", "nombre_especialista": "ESPECIALISTA UNO"}

    ganada = NotificacionEspecialista.objects.get(tipo_notificacion=TipoNotificacion.REASIGNACION_GANADA)
    perdida = NotificacionEspecialista.objects.get(tipo_notificacion=TipoNotificacion.REASIGNACION_PERDIDA)
    assert ganada.especialista_dni == "22222222"
    assert ganada.detalles_cambio["especialista_anterior"] == {"dni": "11111111", "nombre": "ESPECIALISTA UNO"}
    assert perdida.especialista_dni == "11111111"
    assert perdida.detalles_cambio["especialista_anterior"] == {"dni": "22222222", "nombre": "ESPECIALISTA DOS"}
    assert ganada.historial_id == perdida.historial_id == registro.pk


def test_fourth_run_unassigns_with_notification_but_no_history(cuarta_ejecucion) -> None:
    assert cuarta_ejecucion["resumen"] == {EstadoCambio.DESASIGNADO.value: 1}
    assert cuarta_ejecucion["matches"] == 0
    assert cuarta_ejecucion["sinMatch"] == 1

    snapshot = _snapshot(11)
    assert snapshot.especialista_dni is None
    assert snapshot.nombre_especialista is None
    assert snapshot.estado_general == ESTADO_SIN_ASIGNAR

    assert cuarta_ejecucion["historial"] == 0
    assert HistorialAsignacion.objects.count() == 1

    (desasignacion,) = NotificacionEspecialista.objects.filter(tipo_notificacion=TipoNotificacion.DESASIGNACION)
    assert desasignacion.especialista_dni == "22222222"
    assert desasignacion.historial is None


def test_unassigned_teacher_stays_unassigned_without_notifications() -> None:
    crear_docente("T1")

    resultado = _run(8)
    resultado_siguiente = _run(9)

    assert resultado["resumen"] == {EstadoCambio.PERMANECE_SIN_ASIGNAR.value: 1}
    assert resultado_siguiente["resumen"] == {EstadoCambio.PERMANECE_SIN_ASIGNAR.value: 1}
    assert NotificacionEspecialista.objects.count() == 0


def test_history_contains_exactly_the_reassigned_teachers() -> None:
    for id_docente, dia in (("T1", "LUNES"), ("T2", "MARTES"), ("T3", "JUEVES")):
        crear_docente(id_docente, f"DOCENTE {id_docente}", cursos=[curso("A", horario(dia))])
    crear_especialista("111", "UNO", [franja("LUNES"), franja("MARTES")])
    _run(8)

    DisponibilidadAcompaniamiento.objects.all().delete()
    crear_especialista("222", "DOS", [franja("LUNES")])
    crear_especialista("333", "TRES", [franja("JUEVES")])
    resultado = _run(9)

    # T1 reasignado, T2 desasignado, T3 asignación nueva
    assert resultado["resumen"] == {
        EstadoCambio.REASIGNADO.value: 1,
        EstadoCambio.DESASIGNADO.value: 1,
        EstadoCambio.ASIGNACION_NUEVA.value: 1,
    }
    assert list(HistorialAsignacion.objects.values_list("id_docente", flat=True)) == ["T1"]


def test_history_filter_is_configurable(settings) -> None:
    settings.MATCHING = {**settings.MATCHING, "ESTADOS_HISTORIAL": ["ASIGNACION_NUEVA", "DESASIGNADO"]}
    crear_docente("T1")
    crear_especialista("111", "UNO")
    _run(8)
    DisponibilidadAcompaniamiento.objects.all().delete()
    _run(9)

    estados = sorted(HistorialAsignacion.objects.values_list("estado_cambio", flat=True))
    assert estados == [EstadoCambio.ASIGNACION_NUEVA, EstadoCambio.DESASIGNADO]
    assert NotificacionEspecialista.objects.filter(historial__isnull=False).count() == 2


def test_only_latest_roster_load_is_processed() -> None:
    crear_docente("T1", fecha_carga=ejecucion(6))
    crear_docente("T2", fecha_carga=ejecucion(7))
    crear_docente("T3", fecha_carga=ejecucion(7))

    resultado = _run(8)

    assert resultado["totalProcesados"] == 2
    assert set(AsignacionEspecialistaDocente.objects.values_list("id_docente", flat=True)) == {"T2", "T3"}


def test_prior_state_comes_from_the_same_term() -> None:
    crear_docente("T1", semestre="2024-2")
    crear_docente("T1")
    crear_especialista("111", "UNO")
    ServicioMatch.procesar_match("2024-2", fecha_hora_ejecucion=ejecucion(7))

    resultado = _run(8)

    assert resultado["resumen"] == {EstadoCambio.ASIGNACION_NUEVA.value: 1}


def test_empty_roster_raises_without_writes() -> None:
    crear_especialista("111", "UNO")

    with pytest.raises(SinDocentesError):
        _run(8)

    assert AsignacionEspecialistaDocente.objects.count() == 0
    assert NotificacionEspecialista.objects.count() == 0


def test_concurrent_run_for_same_term_is_rejected() -> None:
    crear_docente("T1")
    cache.add(f"match:{SEMESTRE}", "en curso")

    with pytest.raises(MatchEnCursoError):
        _run(8)

    assert AsignacionEspecialistaDocente.objects.count() == 0


def test_lock_is_released_after_a_run() -> None:
    crear_docente("T1")

    _run(8)

    assert cache.get(f"match:{SEMESTRE}") is None
    assert _run(9)["totalProcesados"] == 1


def test_lock_is_released_when_roster_is_empty() -> None:
    with pytest.raises(SinDocentesError):
        _run(8)

    assert cache.get(f"match:{SEMESTRE}") is None
