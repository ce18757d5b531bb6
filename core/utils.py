# core/utils.py


def lista_param(valor):
    """Parámetro de query separado por comas, en mayúsculas y sin vacíos"""
    return [v.strip().upper() for v in valor.split(',') if v.strip()]
