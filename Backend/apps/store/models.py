# apps/store/models.py

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

USER_MODEL = settings.AUTH_USER_MODEL

# =============================================================================
# 1. CATÁLOGO
# =============================================================================

class Products(models.Model):
    class Category(models.TextChoices):
        OIL = 'oil', 'Óleo'
        GUMMIES = 'gummies', 'Gomas'
        CREAM = 'cream', 'Creme'
        COSMETIC = 'cosmetic', 'Cosmético'
        TOPICAL = 'topical', 'Tópico'
        CLOTHING = 'clothing', 'Vestuário'

    name = models.CharField(max_length=150)
    description = models.TextField(null=True, blank=True)
    category = models.CharField(max_length=20, choices=Category.choices)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Controle de estoque: stock_quantity só é alterado pelo StockLedger
    stock_quantity = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    minimum_stock = models.IntegerField(default=5, validators=[MinValueValidator(0)])
    max_stock = models.IntegerField(null=True, blank=True, validators=[MinValueValidator(0)])
    supplier = models.CharField(max_length=150, null=True, blank=True)
    brand = models.CharField(max_length=100, null=True, blank=True)
    sku = models.CharField(max_length=50, null=True, blank=True)

    prescription_required = models.BooleanField(default=True)
    anvisa_required = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Produto'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def is_low_stock(self):
        return self.stock_quantity <= self.minimum_stock

    @property
    def is_out_of_stock(self):
        return self.stock_quantity == 0


# =============================================================================
# 2. LEDGER DE ESTOQUE (imutável)
# =============================================================================

class StockMovements(models.Model):
    class Type(models.TextChoices):
        IN = 'in', 'Entrada'
        OUT = 'out', 'Saída'
        ADJUSTMENT = 'adjustment', 'Ajuste'

    product = models.ForeignKey(Products, on_delete=models.PROTECT, related_name='stock_movements')
    type = models.CharField(max_length=20, choices=Type.choices)
    # in/out: quantidade movimentada (positiva). adjustment: delta implícito (com sinal)
    quantity = models.IntegerField()
    previous_quantity = models.IntegerField()
    new_quantity = models.IntegerField()
    reason = models.TextField()
    reference = models.CharField(max_length=100, null=True, blank=True)  # ORD-<id>, NF, receita
    notes = models.TextField(null=True, blank=True)

    # Lote e valores (opcionais). Venda grava unit_value/total_value do pedido
    batch_number = models.CharField(max_length=100, null=True, blank=True)
    expiration_date = models.DateField(null=True, blank=True)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    unit_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    total_value = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    supplier = models.CharField(max_length=150, null=True, blank=True)

    user = models.ForeignKey(USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    movement_date = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Movimentação de Estoque'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.product_id} {self.type} {self.previous_quantity}->{self.new_quantity}"

    @property
    def delta(self):
        return self.new_quantity - self.previous_quantity

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError('Movimentações de estoque são imutáveis.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError('Movimentações de estoque não podem ser removidas.')


# =============================================================================
# 3. VENDAS
# =============================================================================

class Orders(models.Model):
    class Status(models.TextChoices):
        PENDING_PAYMENT = 'pending_payment', 'Aguardando Pagamento'
        PAID = 'paid', 'Pago'
        SHIPPED = 'shipped', 'Enviado'
        DELIVERED = 'delivered', 'Entregue'
        CANCELLED = 'cancelled', 'Cancelado'

    user = models.ForeignKey(USER_MODEL, on_delete=models.PROTECT, related_name='orders')
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=30, choices=Status.choices, default=Status.PENDING_PAYMENT)
    created_at = models.DateTimeField(auto_now_add=True)

    REFERENCE_PREFIX = "ORD-"

    class Meta:
        verbose_name = 'Pedido'
        ordering = ['-created_at']

    @property
    def reference(self):
        return f"{self.REFERENCE_PREFIX}{self.pk}"

class OrderItems(models.Model):
    order = models.ForeignKey(Orders, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Products, on_delete=models.PROTECT)
    quantity = models.IntegerField(default=1)
    price_at_moment = models.DecimalField(max_digits=10, decimal_places=2)
    class Meta:
        verbose_name = 'Item do Pedido'
