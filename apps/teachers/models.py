#apps/teachers/models.py:

from django.core.validators import RegexValidator
from django.db import models
from django.db.models import Max
from django.utils import timezone

semestre_validator = RegexValidator(
    regex=r'^\d{4}-\d$',
    message='El semestre debe tener el formato "YYYY-N".'
)


class DocentePeriodoQuerySet(models.QuerySet):

    def del_semestre(self, semestre):
        return self.filter(semestre=semestre)

    def ultima_carga(self, semestre):
        """Docentes del semestre en la carga más reciente, en orden de carga"""
        queryset = self.del_semestre(semestre)
        fecha_carga = queryset.aggregate(ultima=Max('fecha_carga'))['ultima']
        if fecha_carga is None:
            return queryset.none()
        return queryset.filter(fecha_carga=fecha_carga).order_by('id')


class DocentePeriodo(models.Model):
    """Docente a acompañar en un semestre, tal como llega de la carga masiva"""
    semestre = models.CharField(max_length=6, db_index=True, validators=[semestre_validator])
    id_docente = models.CharField(max_length=20, db_index=True)
    docente = models.CharField(max_length=150)
    rol_colaborador = models.CharField(max_length=150, blank=True, default='')
    facultad = models.CharField(max_length=150, blank=True, default='')
    programa = models.CharField(max_length=50, blank=True, default='')
    modalidad = models.CharField(max_length=50, blank=True, default='')
    promedio_esa = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    cursos = models.JSONField(default=list, help_text="Cursos con sus horarios")
    fecha_carga = models.DateTimeField(default=timezone.now, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DocentePeriodoQuerySet.as_manager()

    class Meta:
        db_table = 'docente_periodo'
        verbose_name = 'Docente por Semestre'
        verbose_name_plural = 'Docentes por Semestre'

    def __str__(self):
        return f"{self.docente} ({self.id_docente}) - {self.semestre}"

    @property
    def total_horarios(self):
        return sum(len(curso.get('horarios') or []) for curso in self.cursos or [])
