from rest_framework import serializers
from .models import PatientDocuments


class PatientDocumentsSerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField(source='patient.id', read_only=True)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)
    patient_email = serializers.EmailField(source='patient.email', read_only=True)
    has_uploaded_prescription = serializers.BooleanField(read_only=True)
    has_anvisa_document = serializers.BooleanField(read_only=True)
    admin_approved = serializers.BooleanField(read_only=True)

    class Meta:
        model = PatientDocuments
        fields = [
            'patient_id', 'patient_name', 'patient_email',
            'prescription_url', 'prescription_status', 'prescription_reviewed_at',
            'prescription_rejection_reason', 'prescription_notes',
            'anvisa_document_url', 'anvisa_status', 'anvisa_reviewed_at',
            'anvisa_rejection_reason', 'anvisa_notes',
            'has_uploaded_prescription', 'has_anvisa_document', 'admin_approved',
            'updated_at',
        ]
        read_only_fields = fields


class DocumentSubmitSerializer(serializers.Serializer):
    # 'file' (multipart) tem prioridade sobre 'url'
    url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    file = serializers.FileField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        if not attrs.get('file') and not (attrs.get('url') or '').strip():
            raise serializers.ValidationError("Envie o arquivo ('file') ou a URL do documento ('url').")
        return attrs


class DocumentRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
