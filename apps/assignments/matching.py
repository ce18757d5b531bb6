"""
Motor de match docente-especialista.

Funciones puras sobre diccionarios: no consultan la base de datos, así que se
pueden probar con datos armados a mano. El orden de recorrido es la regla de
desempate del match (ver `recorrer_horarios`).
"""
import unicodedata
from types import MappingProxyType
from typing import NamedTuple, Optional

from .models import EstadoCambio, ESTADO_PLANIFICADO

SEPARADOR_CLAVE = '|'


def normalizar_texto(valor):
    """Mayúsculas, sin tildes y con espacios simples"""
    if valor is None:
        return ''
    texto = unicodedata.normalize('NFD', str(valor).strip().upper())
    texto = ''.join(c for c in texto if unicodedata.category(c) != 'Mn')
    return ' '.join(texto.split())


def normalizar_dni(dni):
    if dni is None:
        return None
    dni = str(dni).strip()
    return dni or None


def clave_franja(dia, sede, franja):
    return SEPARADOR_CLAVE.join(normalizar_texto(parte) for parte in (dia, sede, franja))


def clave_horario(horario):
    """Clave de disponibilidad de un bloque horario de curso"""
    return clave_franja(horario.get('dia'), horario.get('campus'), horario.get('hora'))


class Candidato(NamedTuple):
    especialista_dni: str
    nombre_especialista: str
    disponibilidad: dict


class EstadoPrevio(NamedTuple):
    especialista_dni: Optional[str]
    nombre_especialista: Optional[str]
    estado_general: Optional[str]

    @property
    def asignado(self):
        return self.estado_general == ESTADO_PLANIFICADO and self.especialista_dni is not None


class ResultadoDocente(NamedTuple):
    especialista: Optional[Candidato]
    cursos: list
    retenido: bool


class IndiceDisponibilidad:
    """Especialistas libres por (día, sede, franja), en orden de carga"""

    def __init__(self, cubetas):
        self._cubetas = MappingProxyType({clave: tuple(lista) for clave, lista in cubetas.items()})

    @classmethod
    def construir(cls, registros):
        cubetas = {}
        for registro in registros:
            dni = normalizar_dni(registro.get('dni'))
            if dni is None:
                continue
            nombre = registro.get('apellidos_nombres_completos')
            for disponibilidad in registro.get('disponibilidades') or []:
                clave = clave_franja(
                    disponibilidad.get('dia'), disponibilidad.get('sede'), disponibilidad.get('franja')
                )
                cubetas.setdefault(clave, []).append(
                    Candidato(dni, nombre, dict(disponibilidad))
                )
        return cls(cubetas)

    def candidatos(self, clave):
        return self._cubetas.get(clave, ())

    def buscar(self, clave, especialista_dni):
        for candidato in self.candidatos(clave):
            if candidato.especialista_dni == especialista_dni:
                return candidato
        return None

    def __len__(self):
        return len(self._cubetas)

    def __contains__(self, clave):
        return clave in self._cubetas


class IndiceAsignacionPrevia:
    """Último estado conocido de cada docente en el semestre"""

    def __init__(self, estados):
        self._estados = MappingProxyType(dict(estados))

    @classmethod
    def construir(cls, snapshots):
        """`snapshots` debe venir ordenado por fecha de ejecución descendente"""
        estados = {}
        for snapshot in snapshots:
            id_docente = snapshot.get('id_docente')
            if id_docente in estados:
                continue
            estados[id_docente] = EstadoPrevio(
                normalizar_dni(snapshot.get('especialista_dni')),
                snapshot.get('nombre_especialista'),
                snapshot.get('estado_general'),
            )
        return cls(estados)

    def obtener(self, id_docente):
        return self._estados.get(id_docente)

    def __len__(self):
        return len(self._estados)


def recorrer_horarios(cursos):
    """
    Regla de desempate "primera coincidencia": cursos en el orden del docente
    y, dentro de cada curso, horarios en su orden. El primer bloque que cumple
    gana; no se busca un "mejor" bloque.
    """
    for curso in cursos or []:
        for horario in curso.get('horarios') or []:
            yield horario


def buscar_retencion(cursos, indice, especialista_dni):
    for horario in recorrer_horarios(cursos):
        candidato = indice.buscar(clave_horario(horario), especialista_dni)
        if candidato is not None:
            return candidato
    return None


def buscar_nuevo(cursos, indice):
    for horario in recorrer_horarios(cursos):
        candidatos = indice.candidatos(clave_horario(horario))
        if candidatos:
            return candidatos[0]
    return None


def enriquecer_cursos(cursos, indice, especialista):
    """Cursos nuevos con el acompañamiento en cada bloque donde el especialista está libre"""
    enriquecidos = []
    for curso in cursos or []:
        horarios = []
        for horario in curso.get('horarios') or []:
            nuevo = {k: v for k, v in horario.items() if k != 'acompanamiento'}
            coincidencia = None
            if especialista is not None:
                coincidencia = indice.buscar(clave_horario(horario), especialista.especialista_dni)
            if coincidencia is not None:
                nuevo['acompanamiento'] = {
                    'especialista_dni': especialista.especialista_dni,
                    'nombre_especialista': especialista.nombre_especialista,
                    'estado': ESTADO_PLANIFICADO,
                    'disponibilidad_especialista': dict(coincidencia.disponibilidad),
                }
            horarios.append(nuevo)
        enriquecidos.append({**curso, 'horarios': horarios})
    return enriquecidos


def resolver_docente(docente, indice, previo=None):
    """Mantiene al especialista previo si sigue libre; si no, toma el primero disponible"""
    cursos = docente.get('cursos') or []
    especialista = None
    retenido = False

    if previo is not None and previo.asignado:
        especialista = buscar_retencion(cursos, indice, previo.especialista_dni)
        retenido = especialista is not None

    if especialista is None:
        especialista = buscar_nuevo(cursos, indice)

    return ResultadoDocente(especialista, enriquecer_cursos(cursos, indice, especialista), retenido)


def clasificar_cambio(previo, especialista):
    """Tipo de transición del docente respecto de la ejecución anterior"""
    estaba_asignado = previo is not None and previo.asignado

    if not estaba_asignado:
        if especialista is None:
            return EstadoCambio.PERMANECE_SIN_ASIGNAR
        return EstadoCambio.ASIGNACION_NUEVA

    if especialista is None:
        return EstadoCambio.DESASIGNADO
    if especialista.especialista_dni == previo.especialista_dni:
        return EstadoCambio.MANTENIDO
    return EstadoCambio.REASIGNADO
