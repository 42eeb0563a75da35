import logging

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import DocumentError
from .models import PatientDocuments
from .permissions import IsDocumentReviewer, IsPatient
from .serializers import DocumentRejectSerializer, DocumentSubmitSerializer, PatientDocumentsSerializer
from .services import DocumentService

logger = logging.getLogger(__name__)


def document_error_response(error: DocumentError) -> Response:
    return Response(error.as_response_data(), status=error.http_status)


# =============================================================================
# PACIENTE
# =============================================================================

class PatientDocumentsView(APIView):
    permission_classes = [IsAuthenticated, IsPatient]

    def get(self, request):
        documents = DocumentService.get_documents(request.user)
        return Response(PatientDocumentsSerializer(documents).data)


class BaseDocumentUploadView(APIView):
    """
    Aceita JSON com 'url' ou multipart com 'file'. O documento fica 'pending'
    até a revisão de um admin/médico.
    """
    permission_classes = [IsAuthenticated, IsPatient]
    parser_classes = (JSONParser, MultiPartParser, FormParser)
    kind = None

    def post(self, request):
        serializer = DocumentSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            url = data.get('url')
            if data.get('file'):
                url = DocumentService.store_file(request.user, self.kind, data['file'])
            documents = DocumentService.submit(request.user, self.kind, url, notes=data.get('notes'))
        except DocumentError as e:
            return document_error_response(e)

        return Response({
            "message": "Documento enviado! Aguarde a análise da nossa equipe.",
            "documents": PatientDocumentsSerializer(documents).data,
        }, status=status.HTTP_201_CREATED)


class PrescriptionUploadView(BaseDocumentUploadView):
    kind = PatientDocuments.Kind.PRESCRIPTION


class AnvisaUploadView(BaseDocumentUploadView):
    kind = PatientDocuments.Kind.ANVISA


# =============================================================================
# REVISÃO (admin / médico)
# =============================================================================

class PendingDocumentsView(APIView):
    permission_classes = [IsAuthenticated, IsDocumentReviewer]

    def get(self, request):
        pending = DocumentService.pending_reviews()
        return Response(PatientDocumentsSerializer(pending, many=True).data)


class DocumentApproveView(APIView):
    permission_classes = [IsAuthenticated, IsDocumentReviewer]

    def post(self, request, patient_id, kind):
        try:
            documents = DocumentService.approve(patient_id, kind, reviewer=request.user)
        except DocumentError as e:
            return document_error_response(e)
        return Response(PatientDocumentsSerializer(documents).data)


class DocumentRejectView(APIView):
    permission_classes = [IsAuthenticated, IsDocumentReviewer]

    def post(self, request, patient_id, kind):
        serializer = DocumentRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            documents = DocumentService.reject(
                patient_id, kind, reviewer=request.user, reason=serializer.validated_data.get('reason'),
            )
        except DocumentError as e:
            return document_error_response(e)
        return Response(PatientDocumentsSerializer(documents).data)
