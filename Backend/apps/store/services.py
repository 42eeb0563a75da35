# apps/store/services.py

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .exceptions import (
    ConcurrentModification, InsufficientStock, InvalidMovementType, InvalidQuantity,
    InvalidValue, MissingReason, ProductNotFound, PurchaseNotAllowed,
)
from .gating import evaluate_purchase_gate, gate_input_for_user
from .models import OrderItems, Orders, Products, StockMovements
from .serializers import ProductSerializer

logger = logging.getLogger(__name__)

INITIAL_STOCK_REASON = 'Estoque inicial'
SALE_REASON = 'Venda'


class _StaleStock(Exception):
    """O compare-and-swap em stock_quantity não encontrou o valor lido."""


@dataclass(frozen=True)
class StockSummary:
    total_products: int
    low_stock_products: int
    out_of_stock_products: int
    total_stock_value: Decimal

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_products": self.total_products,
            "low_stock_products": self.low_stock_products,
            "out_of_stock_products": self.out_of_stock_products,
            "total_stock_value": str(self.total_stock_value),
        }


class StockLedger:
    """
    Única porta de escrita de Products.stock_quantity.

    Cada movimentação, dentro de uma transação:
    1. lê o estoque atual
    2. calcula e valida a nova quantidade
    3. grava a linha imutável do ledger (antes/depois)
    4. atualiza o produto com UPDATE condicional (stock_quantity = lido)

    Se o UPDATE condicional não afetar linha nenhuma, outra operação mexeu no
    produto: a tentativa é desfeita e repetida com leitura nova, até
    STOCK_LEDGER_MAX_ATTEMPTS vezes.
    """

    @staticmethod
    def max_attempts() -> int:
        return max(1, int(getattr(settings, 'STOCK_LEDGER_MAX_ATTEMPTS', 3)))

    # -------------------------------------------------------------------------
    # Validações
    # -------------------------------------------------------------------------

    @staticmethod
    def _clean_reason(reason) -> str:
        if reason is None or not str(reason).strip():
            raise MissingReason()
        return str(reason).strip()

    @staticmethod
    def _clean_integer(value, field='quantity') -> int:
        # bool é subclasse de int, mas True não é uma quantidade
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidQuantity(f"'{field}' deve ser um número inteiro.")
        return value

    @staticmethod
    def _clean_value(value, field) -> Optional[Decimal]:
        if value is None or value == '':
            return None
        if isinstance(value, bool):
            raise InvalidValue(f"'{field}' deve ser um valor numérico.")
        try:
            value = Decimal(str(value))
        except InvalidOperation:
            raise InvalidValue(f"'{field}' deve ser um valor numérico.")
        if not value.is_finite() or value < 0:
            raise InvalidValue(f"'{field}' não pode ser negativo.")
        return value.quantize(Decimal('0.01'))

    # -------------------------------------------------------------------------
    # Escrita
    # -------------------------------------------------------------------------

    @classmethod
    def record_movement(
        cls,
        product_id,
        movement_type: str,
        quantity: int,
        reason: str,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        movement_date=None,
        user=None,
        batch_number: Optional[str] = None,
        expiration_date=None,
        cost_price=None,
        unit_value=None,
        total_value=None,
        supplier: Optional[str] = None,
    ) -> StockMovements:
        """
        in: soma `quantity`; out: subtrai `quantity` (nunca abaixo de zero);
        adjustment: `quantity` é um delta com sinal, aplicado do mesmo jeito.

        Lote, validade, fornecedor e valores são só informativos: não mexem no
        cálculo do estoque. Sem `total_value`, ele é `unit_value * |quantity|`.
        """
        reason = cls._clean_reason(reason)
        if movement_type not in StockMovements.Type.values:
            raise InvalidMovementType()
        quantity = cls._clean_integer(quantity)
        cost_price = cls._clean_value(cost_price, 'cost_price')
        unit_value = cls._clean_value(unit_value, 'unit_value')
        total_value = cls._clean_value(total_value, 'total_value')
        if total_value is None and unit_value is not None:
            total_value = unit_value * abs(quantity)

        if movement_type == StockMovements.Type.ADJUSTMENT:
            if quantity == 0:
                raise InvalidQuantity("O delta do ajuste não pode ser zero.")
            delta = quantity
        else:
            if quantity <= 0:
                raise InvalidQuantity("A quantidade deve ser um inteiro positivo.")
            delta = -quantity if movement_type == StockMovements.Type.OUT else quantity

        def compute(previous):
            new_quantity = previous + delta
            if new_quantity < 0:
                raise InsufficientStock(
                    f"Estoque insuficiente: disponível {previous}, solicitado {abs(delta)}.",
                    available=previous,
                    requested=abs(delta),
                )
            return new_quantity, quantity

        return cls._commit(
            product_id, movement_type, compute,
            reason=reason, reference=reference, notes=notes,
            movement_date=movement_date, user=user,
            batch_number=batch_number or None,
            expiration_date=expiration_date,
            cost_price=cost_price,
            unit_value=unit_value,
            total_value=total_value,
            supplier=supplier or None,
        )

    @classmethod
    def record_adjustment(
        cls,
        product_id,
        new_quantity: int,
        reason: str,
        notes: Optional[str] = None,
        user=None,
        movement_date=None,
    ) -> StockMovements:
        """Inventário físico: define o estoque em `new_quantity` e registra o delta implícito."""
        reason = cls._clean_reason(reason)
        new_quantity = cls._clean_integer(new_quantity, field='new_quantity')
        if new_quantity < 0:
            raise InvalidQuantity("A nova quantidade não pode ser negativa.")

        def compute(previous):
            return new_quantity, new_quantity - previous

        return cls._commit(
            product_id, StockMovements.Type.ADJUSTMENT, compute,
            reason=reason, reference=None, notes=notes,
            movement_date=movement_date, user=user,
        )

    @classmethod
    def bulk_adjust(cls, updates: Iterable[Dict[str, Any]], user=None) -> List[StockMovements]:
        """Aplica vários ajustes de inventário; se um falhar, nenhum é gravado."""
        movements = []
        with transaction.atomic():
            for update in updates:
                movements.append(cls.record_adjustment(
                    update.get('product_id'),
                    update.get('new_quantity'),
                    update.get('reason'),
                    notes=update.get('notes'),
                    user=user,
                ))
        return movements

    @staticmethod
    def _compare_and_swap(product_id, expected: int, new_quantity: int) -> bool:
        updated = Products.objects.filter(pk=product_id, stock_quantity=expected).update(
            stock_quantity=new_quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    @classmethod
    def _read_quantity(cls, product_id) -> int:
        try:
            previous = Products.objects.filter(pk=product_id).values_list('stock_quantity', flat=True).first()
        except (TypeError, ValueError):
            previous = None
        if previous is None:
            raise ProductNotFound(product_id=product_id)
        return previous

    @classmethod
    def _commit(cls, product_id, movement_type, compute, *, reason, reference, notes, movement_date, user, **extra):
        attempts = cls.max_attempts()

        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    previous = cls._read_quantity(product_id)
                    new_quantity, stored_quantity = compute(previous)

                    movement = StockMovements.objects.create(
                        product_id=product_id,
                        type=movement_type,
                        quantity=stored_quantity,
                        previous_quantity=previous,
                        new_quantity=new_quantity,
                        reason=reason,
                        reference=reference or None,
                        notes=notes or None,
                        user=user,
                        movement_date=movement_date or timezone.now(),
                        **extra,
                    )

                    if not cls._compare_and_swap(product_id, previous, new_quantity):
                        raise _StaleStock()
            except _StaleStock:
                logger.warning(
                    f"Conflito de estoque no produto {product_id} "
                    f"(tentativa {attempt}/{attempts}). Relendo quantidade."
                )
                continue
            except InsufficientStock as e:
                logger.warning(f"Saída recusada no produto {product_id}: {e.message}")
                raise

            logger.info(
                f"Estoque produto {product_id}: {movement.type} "
                f"{movement.previous_quantity} -> {movement.new_quantity} ({reason})"
            )
            return movement

        logger.error(f"Movimentação abortada no produto {product_id}: {attempts} conflitos seguidos.")
        raise ConcurrentModification(attempts=attempts)

    # -------------------------------------------------------------------------
    # Consultas
    # -------------------------------------------------------------------------

    @staticmethod
    def movements(product_id=None):
        queryset = StockMovements.objects.select_related('product', 'user')
        if product_id is not None:
            queryset = queryset.filter(product_id=product_id)
        return queryset

    @staticmethod
    def order_for(movement: StockMovements) -> Optional[Orders]:
        """Pedido de origem de uma venda (referência ORD-<id>), se existir."""
        reference = movement.reference or ''
        if not reference.startswith(Orders.REFERENCE_PREFIX):
            return None
        try:
            order_id = int(reference[len(Orders.REFERENCE_PREFIX):])
        except ValueError:
            return None
        return Orders.objects.select_related('user').prefetch_related('items__product').filter(pk=order_id).first()

    @classmethod
    def history(cls, product_id, limit: Optional[int] = None):
        if limit is None:
            limit = settings.STOCK_HISTORY_DEFAULT_LIMIT
        return cls.movements(product_id)[:max(0, limit)]

    @staticmethod
    def low_stock_products():
        return Products.objects.filter(
            is_active=True,
            stock_quantity__lte=F('minimum_stock'),
        ).order_by('stock_quantity', 'name')

    @staticmethod
    def get_stock_summary() -> StockSummary:
        """Recalculado a cada chamada sobre a tabela de produtos (estado atual, não histórico)."""
        total = low = out = 0
        value = Decimal('0.00')

        rows = Products.objects.filter(is_active=True).values_list('stock_quantity', 'minimum_stock', 'price')
        for stock_quantity, minimum_stock, price in rows:
            total += 1
            if stock_quantity <= minimum_stock:
                low += 1
            if stock_quantity == 0:
                out += 1
            value += Decimal(stock_quantity) * (price or Decimal('0'))

        return StockSummary(
            total_products=total,
            low_stock_products=low,
            out_of_stock_products=out,
            total_stock_value=value.quantize(Decimal('0.01')),
        )


class ProductService:
    @staticmethod
    @transaction.atomic
    def create_product(data: Dict[str, Any], user=None) -> Products:
        data = dict(data)
        initial_stock = data.pop('initial_stock', 0) or 0
        data.pop('stock_quantity', None)

        product = Products.objects.create(stock_quantity=0, **data)
        if initial_stock > 0:
            StockLedger.record_movement(
                product.pk, StockMovements.Type.IN, initial_stock, INITIAL_STOCK_REASON, user=user,
            )
            product.refresh_from_db()

        logger.info(f"Produto criado: {product.pk} '{product.name}' (estoque inicial {initial_stock})")
        return product

    @staticmethod
    def update_product(product: Products, data: Dict[str, Any]) -> Products:
        data = dict(data)
        data.pop('initial_stock', None)
        data.pop('stock_quantity', None)
        for field, value in data.items():
            setattr(product, field, value)
        # stock_quantity fica fora do save para não sobrescrever movimentações concorrentes
        product.save(update_fields=list(data.keys()) + ['updated_at'])
        return product

    @staticmethod
    def deactivate_product(product: Products) -> Products:
        # Histórico do ledger é preservado: o produto só sai do catálogo
        product.is_active = False
        product.save(update_fields=['is_active', 'updated_at'])
        return product


class CatalogService:
    @staticmethod
    def get_catalog(user, category: Optional[str] = None, supplier: Optional[str] = None) -> Dict[str, Any]:
        """
        Catálogo com preços condicionados ao tier do usuário.
        Recalculado a cada requisição (sem cache).
        """
        gate_input = gate_input_for_user(user)
        decision = evaluate_purchase_gate(gate_input)

        products = Products.objects.filter(is_active=True)
        if category:
            products = products.filter(category=category)
        if supplier:
            products = products.filter(supplier=supplier)

        serializer = ProductSerializer(products, many=True, context={'prices_visible': decision.prices_visible})

        return {
            "products": serializer.data,
            "tier": decision.tier.value,
            "pricesVisible": decision.prices_visible,
            "hasUploadedPrescription": gate_input.has_uploaded_prescription,
            "hasAnvisaDocument": gate_input.has_anvisa_document,
            "canPurchase": decision.can_add_to_cart,
        }


class OrderService:
    @staticmethod
    def place_order(user, items: List[Dict[str, Any]]) -> Orders:
        """
        Cria o pedido e dá baixa no estoque pelo ledger (referência ORD-<id>).
        Qualquer falha de estoque desfaz o pedido inteiro.
        """
        decision = evaluate_purchase_gate(gate_input_for_user(user))
        if not decision.can_add_to_cart:
            raise PurchaseNotAllowed(tier=decision.tier.value)
        if not items:
            raise InvalidQuantity("O pedido precisa de ao menos um item.")

        with transaction.atomic():
            order = Orders.objects.create(user=user, total_amount=Decimal('0.00'))
            total = Decimal('0.00')

            for item in items:
                product = Products.objects.filter(pk=item['product_id'], is_active=True).first()
                if product is None:
                    raise ProductNotFound(product_id=item['product_id'])

                quantity = item['quantity']
                OrderItems.objects.create(
                    order=order, product=product, quantity=quantity, price_at_moment=product.price,
                )
                StockLedger.record_movement(
                    product.pk, StockMovements.Type.OUT, quantity, SALE_REASON,
                    reference=order.reference, user=user,
                    unit_value=product.price, total_value=product.price * quantity,
                )
                total += product.price * quantity

            order.total_amount = total
            order.save(update_fields=['total_amount'])

        logger.info(f"Pedido {order.reference} criado por {user.email}: R$ {total}")
        return order
