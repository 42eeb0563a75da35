import logging
import os
from typing import Optional

from django.conf import settings
from django.core.files.storage import default_storage
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import User
from .exceptions import DocumentsNotFound, InvalidDocumentKind, MissingDocument, NotAPatient, SelfReview
from .models import PatientDocuments

logger = logging.getLogger(__name__)

Kind = PatientDocuments.Kind
Status = PatientDocuments.Status


class DocumentService:
    """
    Envio (paciente) e revisão (admin/médico) de receita e autorização ANVISA.

    O envio só grava a referência como 'pending'. Aprovação é sempre uma ação
    separada de um revisor, então o paciente nunca libera a compra sozinho.
    """

    @staticmethod
    def _check_kind(kind: str) -> str:
        if str(kind) not in Kind.values:
            raise InvalidDocumentKind()
        return str(kind)

    @staticmethod
    def get_documents(user: User) -> PatientDocuments:
        documents, _ = PatientDocuments.objects.get_or_create(patient=user)
        return documents

    @staticmethod
    def store_file(user: User, kind: str, file_obj) -> str:
        """Salva o arquivo no storage padrão e devolve a URL usada como referência."""
        filename = os.path.basename(file_obj.name)
        path = default_storage.save(f"documents/{user.pk}/{str(kind)}/{filename}", file_obj)
        return default_storage.url(path)

    @classmethod
    @transaction.atomic
    def submit(cls, user: User, kind: str, url: str, notes: Optional[str] = None) -> PatientDocuments:
        if not user.is_patient:
            raise NotAPatient()
        kind = cls._check_kind(kind)
        if not url or not str(url).strip():
            raise MissingDocument()

        documents = PatientDocuments.objects.select_for_update().filter(patient=user).first()
        if documents is None:
            documents = PatientDocuments(patient=user)

        prefix = documents.FIELD_PREFIX[kind]
        setattr(documents, documents.URL_FIELD[kind], str(url).strip())
        # Novo envio sempre volta para a fila de revisão
        setattr(documents, f"{prefix}_status", Status.PENDING)
        setattr(documents, f"{prefix}_reviewed_by", None)
        setattr(documents, f"{prefix}_reviewed_at", None)
        setattr(documents, f"{prefix}_rejection_reason", None)
        setattr(documents, f"{prefix}_notes", notes or None)
        documents.save()

        logger.info(f"Documento '{kind}' enviado pelo paciente {user.pk}: {url}")
        return documents

    @classmethod
    def submit_prescription(cls, user: User, url: str, notes: Optional[str] = None) -> PatientDocuments:
        return cls.submit(user, Kind.PRESCRIPTION, url, notes)

    @classmethod
    def submit_anvisa(cls, user: User, url: str, notes: Optional[str] = None) -> PatientDocuments:
        return cls.submit(user, Kind.ANVISA, url, notes)

    @classmethod
    def _review(cls, patient_id, kind: str, reviewer: User, new_status: str, reason: Optional[str] = None) -> PatientDocuments:
        kind = cls._check_kind(kind)
        with transaction.atomic():
            documents = (
                PatientDocuments.objects.select_for_update()
                .select_related('patient')
                .filter(patient_id=patient_id)
                .first()
            )
            if documents is None:
                raise DocumentsNotFound()
            if documents.patient_id == reviewer.pk:
                raise SelfReview()
            if not documents.url_for(kind):
                raise MissingDocument('Este documento ainda não foi enviado pelo paciente.')

            prefix = documents.FIELD_PREFIX[kind]
            setattr(documents, f"{prefix}_status", new_status)
            setattr(documents, f"{prefix}_reviewed_by", reviewer)
            setattr(documents, f"{prefix}_reviewed_at", timezone.now())
            setattr(documents, f"{prefix}_rejection_reason", reason if new_status == Status.REJECTED else None)
            documents.save()

        logger.info(
            f"Documento '{kind}' do paciente {patient_id} -> {new_status} por {reviewer.email}. "
            f"Compra liberada: {documents.admin_approved}"
        )
        return documents

    @classmethod
    def approve(cls, patient_id, kind: str, reviewer: User) -> PatientDocuments:
        return cls._review(patient_id, kind, reviewer, Status.APPROVED)

    @classmethod
    def reject(cls, patient_id, kind: str, reviewer: User, reason: Optional[str] = None) -> PatientDocuments:
        documents = cls._review(patient_id, kind, reviewer, Status.REJECTED, reason=reason)
        cls._notify_rejection(documents, kind, reason)
        return documents

    @staticmethod
    def pending_reviews():
        return (
            PatientDocuments.objects.select_related('patient')
            .filter(Q(prescription_status=Status.PENDING) | Q(anvisa_status=Status.PENDING))
            .order_by('updated_at')
        )

    @staticmethod
    def _notify_rejection(documents: PatientDocuments, kind: str, reason: Optional[str]) -> None:
        patient = documents.patient
        label = Kind(kind).label
        message = (
            f"Olá {patient.full_name or patient.email},\n\n"
            f"Infelizmente seu documento ({label}) não foi aprovado.\n"
        )
        if reason:
            message += f"Motivo: {reason}\n"
        message += "\nPor favor, envie um novo documento ou entre em contato conosco."

        try:
            send_mail(
                subject='Documento Reprovado',
                message=message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[patient.email],
            )
        except Exception as e:
            # A reprovação já foi gravada; falha no e-mail não desfaz a revisão
            logger.error(f"Erro ao enviar e-mail de reprovação para {patient.email}: {e}")
