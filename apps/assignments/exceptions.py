class MatchError(Exception):
    """Error base del proceso de match"""


class SinDocentesError(MatchError):
    """No hay docentes cargados para el semestre solicitado"""

    def __init__(self, semestre):
        self.semestre = semestre
        super().__init__(f'No se encontraron docentes para procesar en el semestre {semestre}.')


class MatchEnCursoError(MatchError):
    """Ya hay una ejecución del match en curso para el semestre"""

    def __init__(self, semestre):
        self.semestre = semestre
        super().__init__(f'Ya existe un proceso de match en curso para el semestre {semestre}.')
