from unittest.mock import patch

import pytest
from django.core.cache import cache
from django.db import IntegrityError

from apps.assignments.models import AsignacionEspecialistaDocente, HistorialAsignacion
from apps.assignments.services import ServicioMatch
from apps.specialists.models import DisponibilidadAcompaniamiento
from apps.teachers.models import DocentePeriodo
from core.utils import lista_param
from factories import SEMESTRE, crear_docente, crear_especialista, curso, ejecucion, franja, horario

pytestmark = pytest.mark.django_db

MATCH_URL = "/api/assignments/match/"
ASIGNACIONES_URL = "/api/assignments/asignaciones/"
HISTORIAL_URL = "/api/assignments/historial/"


def _reasignar_t1():
    """Deja una asignación inicial y una reasignación de T1; T2 sin especialista"""
    crear_docente("T1", "DOCENTE UNO", cursos=[curso("A", horario("LUNES"))])
    crear_docente("T2", "DOCENTE DOS", cursos=[curso("B", horario("SABADO"))])
    crear_especialista("111", "UNO", [franja("LUNES")])
    ServicioMatch.procesar_match(SEMESTRE, fecha_hora_ejecucion=ejecucion(8))

    DisponibilidadAcompaniamiento.objects.all().delete()
    crear_especialista("222", "DOS", [franja("LUNES")])
    ServicioMatch.procesar_match(SEMESTRE, fecha_hora_ejecucion=ejecucion(9))


@pytest.mark.parametrize("valor, esperado", [
    ("reasignado", ["REASIGNADO"]),
    (" no_leida , leida ,", ["NO_LEIDA", "LEIDA"]),
    (",,", []),
])
def test_comma_list_param(valor, esperado) -> None:
    assert lista_param(valor) == esperado


@pytest.mark.parametrize("payload", [{}, {"semestre": "2025"}, {"semestre": "25-1"}, {"semestre": "2025-12"}])
def test_match_rejects_malformed_term(api_client, payload) -> None:
    response = api_client.post(MATCH_URL, payload, format="json")

    assert response.status_code == 400
    assert "semestre" in response.data["errors"]
    assert AsignacionEspecialistaDocente.objects.count() == 0


def test_match_without_roster_returns_not_found(api_client) -> None:
    response = api_client.post(MATCH_URL, {"semestre": SEMESTRE}, format="json")

    assert response.status_code == 404
    assert response.data["totalProcesados"] == 0
    assert response.data["matches"] == 0
    assert response.data["sinMatch"] == 0


def test_match_run_returns_summary(api_client) -> None:
    crear_docente("T1")
    crear_docente("T2", "DOCENTE DOS", cursos=[curso("B", horario("SABADO"))])
    crear_especialista("111", "UNO")

    response = api_client.post(MATCH_URL, {"semestre": SEMESTRE}, format="json")

    assert response.status_code == 201
    assert response.data["message"] == "Proceso de match finalizado."
    assert response.data["totalProcesados"] == 2
    assert response.data["matches"] == 1
    assert response.data["sinMatch"] == 1
    assert response.data["notificaciones"] == 1
    assert AsignacionEspecialistaDocente.objects.count() == 2


def test_match_in_progress_returns_conflict(api_client) -> None:
    crear_docente("T1")
    cache.add(f"match:{SEMESTRE}", "en curso")

    response = api_client.post(MATCH_URL, {"semestre": SEMESTRE}, format="json")

    assert response.status_code == 409


@pytest.mark.django_db(transaction=True)
def test_history_write_failure_keeps_snapshots_and_returns_server_error(api_client, settings) -> None:
    settings.MATCHING = {**settings.MATCHING, "ESTADOS_HISTORIAL": ["ASIGNACION_NUEVA"]}
    crear_docente("T1")
    crear_docente("T2", "DOCENTE DOS", cursos=[curso("B", horario("SABADO"))])
    crear_especialista("111", "UNO")

    with patch.object(HistorialAsignacion.objects, "bulk_create",
                      side_effect=IntegrityError("historial no disponible")):
        response = api_client.post(MATCH_URL, {"semestre": SEMESTRE}, format="json")

    assert response.status_code == 500
    assert response.data == {"message": "Error interno del servidor.", "error": "historial no disponible"}
    assert AsignacionEspecialistaDocente.objects.count() == 2
    assert HistorialAsignacion.objects.count() == 0
    assert cache.get(f"match:{SEMESTRE}") is None


@pytest.mark.django_db(transaction=True)
def test_duplicate_snapshot_is_reported_without_retry(api_client) -> None:
    crear_docente("T1")
    crear_docente("T1")
    crear_especialista("111", "UNO")

    response = api_client.post(MATCH_URL, {"semestre": SEMESTRE}, format="json")

    assert response.status_code == 500
    assert "unique" in response.data["error"].lower()
    assert AsignacionEspecialistaDocente.objects.count() == 0


def test_latest_assignments_only_show_last_run(api_client) -> None:
    _reasignar_t1()

    response = api_client.get(ASIGNACIONES_URL, {"semestre": SEMESTRE, "latest": "true"})

    assert response.status_code == 200
    assert len(response.data) == 2
    asignacion_t1 = next(a for a in response.data if a["id_docente"] == "T1")
    assert asignacion_t1["especialista_dni"] == "222"
    assert asignacion_t1["tiene_asignacion"] is True


def test_assignments_filter_by_having_specialist(api_client) -> None:
    _reasignar_t1()

    response = api_client.get(ASIGNACIONES_URL, {"latest": "true", "tiene_asignacion": "false"})

    assert [a["id_docente"] for a in response.data] == ["T2"]


def test_assignment_statistics(api_client) -> None:
    _reasignar_t1()

    response = api_client.get(f"{ASIGNACIONES_URL}estadisticas/", {"semestre": SEMESTRE})

    estadisticas = response.data["estadisticas"]
    assert estadisticas["total_docentes"] == 2
    assert estadisticas["con_asignacion"] == 1
    assert estadisticas["porcentaje_con_asignacion"] == 50.0
    assert estadisticas["top5_especialistas_mas_docentes"][0]["especialista_dni"] == "222"


def test_assignments_of_a_specialist(api_client) -> None:
    _reasignar_t1()

    response = api_client.get(f"{ASIGNACIONES_URL}especialista/111/", {"semestre": SEMESTRE})

    assert response.data["total_docentes"] == 0


def test_history_lists_reassignments(api_client) -> None:
    _reasignar_t1()

    response = api_client.get(HISTORIAL_URL, {"estado_cambio": "reasignado"})

    assert response.status_code == 200
    (registro,) = response.data
    assert registro["id_docente"] == "T1"
    assert registro["detalle_anterior"]["especialista_dni"] == "111"
    assert registro["estado_cambio_display"] == "Reasignado"


def test_history_date_range_filter(api_client) -> None:
    _reasignar_t1()

    assert len(api_client.get(HISTORIAL_URL, {"fecha_desde": "2025-03-10"}).data) == 1
    assert len(api_client.get(HISTORIAL_URL, {"fecha_desde": "2025-03-11"}).data) == 0


def test_history_of_a_specialist(api_client) -> None:
    _reasignar_t1()

    response = api_client.get(f"{HISTORIAL_URL}especialista/222/")

    assert response.data["nombre_especialista"] == "DOS"
    assert response.data["resumen"]["total_asignaciones"] == 1
    assert response.data["resumen"]["por_tipo_cambio"] == {"REASIGNADO": 1}


def test_history_summary(api_client) -> None:
    _reasignar_t1()

    response = api_client.get(f"{HISTORIAL_URL}resumen/")

    assert response.data["total_registros"] == HistorialAsignacion.objects.count() == 1
    assert response.data["especialistas_unicos"] == 1
    assert response.data["semestres"] == [SEMESTRE]


def test_teacher_bulk_load_shares_load_time(api_client) -> None:
    payload = [
        {"semestre": SEMESTRE, "id_docente": " T1 ", "docente": "DOCENTE UNO",
         "cursos": [curso("A", horario())]},
        {"semestre": SEMESTRE, "id_docente": "T2", "docente": "DOCENTE DOS", "cursos": []},
    ]

    response = api_client.post("/api/teachers/docentes/carga-masiva/", payload, format="json")

    assert response.status_code == 201
    assert response.data["insertedCount"] == 2
    assert DocentePeriodo.objects.values("fecha_carga").distinct().count() == 1
    assert DocentePeriodo.objects.filter(id_docente="T1").exists()


def test_teacher_listing_can_show_only_latest_load(api_client) -> None:
    crear_docente("T1", fecha_carga=ejecucion(6))
    crear_docente("T2", fecha_carga=ejecucion(7))
    crear_docente("T3", semestre="2024-2", fecha_carga=ejecucion(8))

    response = api_client.get("/api/teachers/docentes/", {"semestre": SEMESTRE, "ultima_carga": "true"})

    assert response.status_code == 200
    assert [d["id_docente"] for d in response.data] == ["T2"]


def test_teacher_bulk_load_requires_array(api_client) -> None:
    response = api_client.post("/api/teachers/docentes/carga-masiva/", {"semestre": SEMESTRE}, format="json")

    assert response.status_code == 400


def test_specialist_bulk_load_coerces_dni(api_client) -> None:
    payload = [{
        "dni": 11111111,
        "apellidos_nombres_completos": "ESPECIALISTA UNO",
        "disponibilidades": [franja()],
    }]

    response = api_client.post("/api/specialists/disponibilidades/carga-masiva/", payload, format="json")

    assert response.status_code == 201
    detalle = api_client.get("/api/specialists/disponibilidades/especialista/11111111/")
    assert detalle.data["total_franjas"] == 1
