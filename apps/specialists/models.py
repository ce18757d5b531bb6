#apps/specialists/models.py:

from django.db import models


def modalidad_por_defecto():
    return {'modalidad': 'PRESENCIAL', 'puede_otros': True}


class DisponibilidadAcompaniamiento(models.Model):
    """
    Disponibilidad de un especialista de acompañamiento.
    Cada elemento de `disponibilidades` es una franja libre:
    {'dia': 'LUNES', 'sede': 'LIMA CENTRO', 'franja': '0730 - 0900', 'turno': 'M'}
    """
    dni = models.CharField(max_length=20, db_index=True)
    apellidos_nombres_completos = models.CharField(max_length=150)
    horas_disponibles = models.PositiveSmallIntegerField(default=0)
    antiguedad = models.CharField(max_length=50, blank=True, default='')

    # Preferencias informativas, no intervienen en el match
    segmentos = models.JSONField(default=list, blank=True)
    modalidad_acompaniamiento = models.JSONField(default=modalidad_por_defecto, blank=True)

    disponibilidades = models.JSONField(default=list)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'disponibilidad_acompaniamiento'
        verbose_name = 'Disponibilidad de Acompañamiento'
        verbose_name_plural = 'Disponibilidades de Acompañamiento'

    def __str__(self):
        return f"{self.apellidos_nombres_completos} ({self.dni})"

    def save(self, *args, **kwargs):
        self.dni = str(self.dni).strip()
        super().save(*args, **kwargs)
