from django.urls import path
from .views import (
    PatientDocumentsView, PrescriptionUploadView, AnvisaUploadView,
    PendingDocumentsView, DocumentApproveView, DocumentRejectView,
)

urlpatterns = [
    # Paciente
    path('documents/', PatientDocumentsView.as_view(), name='medical-documents'),
    path('documents/prescription/', PrescriptionUploadView.as_view(), name='medical-documents-prescription'),
    path('documents/anvisa/', AnvisaUploadView.as_view(), name='medical-documents-anvisa'),

    # Revisão
    path('documents/pending/', PendingDocumentsView.as_view(), name='medical-documents-pending'),
    path('documents/<int:patient_id>/<str:kind>/approve/', DocumentApproveView.as_view(), name='medical-documents-approve'),
    path('documents/<int:patient_id>/<str:kind>/reject/', DocumentRejectView.as_view(), name='medical-documents-reject'),
]
