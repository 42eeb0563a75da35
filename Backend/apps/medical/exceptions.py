from rest_framework import status


class DocumentError(Exception):
    code = 'document_error'
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = 'Documento inválido.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_response_data(self):
        return {"error": self.message, "code": self.code}


class MissingDocument(DocumentError):
    code = 'missing_document'
    default_message = 'A referência (URL) do documento é obrigatória.'


class NotAPatient(DocumentError):
    code = 'not_a_patient'
    http_status = status.HTTP_403_FORBIDDEN
    default_message = 'Apenas pacientes podem enviar documentos.'


class InvalidDocumentKind(DocumentError):
    code = 'invalid_document_kind'
    default_message = "Tipo de documento inválido (use 'prescription' ou 'anvisa')."


class SelfReview(DocumentError):
    code = 'self_review'
    http_status = status.HTTP_403_FORBIDDEN
    default_message = 'Não é permitido revisar os próprios documentos.'


class DocumentsNotFound(DocumentError):
    code = 'documents_not_found'
    http_status = status.HTTP_404_NOT_FOUND
    default_message = 'Nenhum documento encontrado para este paciente.'
