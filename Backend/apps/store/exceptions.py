# apps/store/exceptions.py

from rest_framework import status


class StoreError(Exception):
    """
    Erro de regra de negócio da loja/estoque.
    `code` é o tipo legível por máquina; `message` vai para o usuário.
    """
    code = 'store_error'
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = 'Operação inválida.'

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_response_data(self):
        data = {"error": self.message, "code": self.code}
        if self.details:
            data.update(self.details)
        return data


class InsufficientStock(StoreError):
    code = 'insufficient_stock'
    http_status = status.HTTP_409_CONFLICT
    default_message = 'Estoque insuficiente.'


class InvalidQuantity(StoreError):
    code = 'invalid_quantity'
    default_message = 'Quantidade inválida.'


class InvalidValue(StoreError):
    code = 'invalid_value'
    default_message = 'Valor monetário inválido.'


class MissingReason(StoreError):
    code = 'missing_reason'
    default_message = 'O motivo da movimentação é obrigatório.'


class InvalidMovementType(StoreError):
    code = 'invalid_movement_type'
    default_message = "Tipo de movimentação inválido (use 'in', 'out' ou 'adjustment')."


class ConcurrentModification(StoreError):
    code = 'concurrent_modification'
    http_status = status.HTTP_409_CONFLICT
    default_message = 'O estoque foi alterado por outra operação. Tente novamente.'


class ProductNotFound(StoreError):
    code = 'product_not_found'
    http_status = status.HTTP_404_NOT_FOUND
    default_message = 'Produto não encontrado.'


class PurchaseNotAllowed(StoreError):
    code = 'purchase_not_allowed'
    http_status = status.HTTP_403_FORBIDDEN
    default_message = 'Compra não liberada para este usuário.'
