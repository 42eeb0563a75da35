# apps/store/admin.py

from django.contrib import admin
from .models import Products, StockMovements, Orders, OrderItems

@admin.register(Products)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'price', 'stock_quantity', 'minimum_stock', 'is_active')
    list_filter = ('category', 'is_active', 'supplier')
    search_fields = ('name', 'sku', 'supplier')
    # Estoque só muda pelo ledger (StockLedger)
    readonly_fields = ('stock_quantity',)

    def save_model(self, request, obj, form, change):
        if not change:
            super().save_model(request, obj, form, change)
            return
        # O objeto do formulário pode ter sido lido antes de uma venda; grava só o que foi editado
        fields = [name for name in form.changed_data if name != 'stock_quantity']
        obj.save(update_fields=fields + ['updated_at'])

@admin.register(StockMovements)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ('product', 'type', 'quantity', 'previous_quantity', 'new_quantity', 'reason', 'movement_date')
    list_filter = ('type', 'movement_date')
    search_fields = ('product__name', 'reason', 'reference')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

class OrderItemInline(admin.TabularInline):
    model = OrderItems
    extra = 0
    readonly_fields = ('product', 'quantity', 'price_at_moment')

@admin.register(Orders)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'total_amount', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('user__email', 'id')
    inlines = [OrderItemInline]
