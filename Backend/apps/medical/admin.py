# apps/medical/admin.py

from django.contrib import admin
from .models import PatientDocuments

@admin.register(PatientDocuments)
class PatientDocumentsAdmin(admin.ModelAdmin):
    list_display = ('patient', 'prescription_status', 'anvisa_status', 'updated_at')
    list_filter = ('prescription_status', 'anvisa_status')
    search_fields = ('patient__email', 'patient__full_name')
    readonly_fields = ('prescription_reviewed_by', 'prescription_reviewed_at', 'anvisa_reviewed_by', 'anvisa_reviewed_at')
