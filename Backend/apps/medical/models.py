# apps/medical/models.py

from django.db import models
from django.conf import settings

USER_MODEL = settings.AUTH_USER_MODEL

# =============================================================================
# DOCUMENTOS DO PACIENTE (Receita + Autorização ANVISA)
# =============================================================================
# Envio e aprovação são etapas separadas: o paciente só envia a referência,
# quem aprova é um revisor (admin/médico).

class PatientDocuments(models.Model):
    class Kind(models.TextChoices):
        PRESCRIPTION = 'prescription', 'Receita Médica'
        ANVISA = 'anvisa', 'Autorização ANVISA'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pendente'
        APPROVED = 'approved', 'Aprovado'
        REJECTED = 'rejected', 'Reprovado'

    patient = models.OneToOneField(USER_MODEL, on_delete=models.CASCADE, related_name='documents')

    prescription_url = models.CharField(max_length=500, null=True, blank=True)
    prescription_status = models.CharField(max_length=20, choices=Status.choices, null=True, blank=True)
    prescription_reviewed_by = models.ForeignKey(
        USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    prescription_reviewed_at = models.DateTimeField(null=True, blank=True)
    prescription_rejection_reason = models.TextField(null=True, blank=True)
    prescription_notes = models.TextField(null=True, blank=True)

    anvisa_document_url = models.CharField(max_length=500, null=True, blank=True)
    anvisa_status = models.CharField(max_length=20, choices=Status.choices, null=True, blank=True)
    anvisa_reviewed_by = models.ForeignKey(
        USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    anvisa_reviewed_at = models.DateTimeField(null=True, blank=True)
    anvisa_rejection_reason = models.TextField(null=True, blank=True)
    anvisa_notes = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Documentos do Paciente'

    def __str__(self):
        return f"{self.patient} - receita: {self.prescription_status} / anvisa: {self.anvisa_status}"

    # Mapeamento tipo de documento -> prefixo dos campos
    FIELD_PREFIX = {
        'prescription': 'prescription',
        'anvisa': 'anvisa',
    }
    URL_FIELD = {
        'prescription': 'prescription_url',
        'anvisa': 'anvisa_document_url',
    }

    def url_for(self, kind):
        return getattr(self, self.URL_FIELD[str(kind)])

    def status_for(self, kind):
        return getattr(self, f"{self.FIELD_PREFIX[str(kind)]}_status")

    @property
    def has_uploaded_prescription(self):
        return bool(self.prescription_url) and self.prescription_status != self.Status.REJECTED

    @property
    def has_anvisa_document(self):
        return bool(self.anvisa_document_url) and self.anvisa_status != self.Status.REJECTED

    @property
    def admin_approved(self):
        return (
            self.prescription_status == self.Status.APPROVED
            and self.anvisa_status == self.Status.APPROVED
        )
