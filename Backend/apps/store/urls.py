from django.urls import path
from .views import (
    ProductCatalogView, ProductListCreateView, ProductDetailView,
    StockMovementListView, StockMovementDetailView, ProductStockMovementsView, StockHistoryView, StockSummaryView,
    LowStockView, StockUpdateView, StockAdjustView, StockBulkUpdateView, OrderView,
)

urlpatterns = [
    # Catálogo
    path('catalog/', ProductCatalogView.as_view(), name='product_catalog'),
    path('products/', ProductListCreateView.as_view(), name='product_list_create'),
    path('products/<int:pk>/', ProductDetailView.as_view(), name='product_detail'),

    # Estoque
    path('stock/movements/', StockMovementListView.as_view(), name='stock_movements'),
    path('stock/movements/<int:pk>/', StockMovementDetailView.as_view(), name='stock_movement_detail'),
    path('stock/movements/product/<int:product_id>/', ProductStockMovementsView.as_view(), name='stock_movements_product'),
    path('stock/history/<int:product_id>/', StockHistoryView.as_view(), name='stock_history'),
    path('stock/summary/', StockSummaryView.as_view(), name='stock_summary'),
    path('stock/low-stock/', LowStockView.as_view(), name='stock_low_stock'),
    path('stock/update/', StockUpdateView.as_view(), name='stock_update'),
    path('stock/adjust/', StockAdjustView.as_view(), name='stock_adjust'),
    path('stock/bulk-update/', StockBulkUpdateView.as_view(), name='stock_bulk_update'),

    # Pedidos
    path('orders/', OrderView.as_view(), name='orders'),
]
