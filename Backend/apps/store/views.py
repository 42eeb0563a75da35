import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import StoreError
from .gating import purchase_decision_for_user
from .models import Orders, Products
from .permissions import IsAdminRole
from .serializers import (
    BulkStockAdjustSerializer, OrderSerializer, PlaceOrderSerializer, ProductAdminSerializer,
    ProductSerializer, StockAdjustSerializer, StockMovementSerializer, StockUpdateSerializer,
)
from .services import CatalogService, OrderService, ProductService, StockLedger

logger = logging.getLogger(__name__)


def store_error_response(error: StoreError) -> Response:
    return Response(error.as_response_data(), status=error.http_status)


def movement_response(movement, status_code=status.HTTP_201_CREATED) -> Response:
    return Response({
        "movement": StockMovementSerializer(movement).data,
        "stock_quantity": movement.new_quantity,
    }, status=status_code)


def user_summary(user, with_role=False):
    if user is None:
        return None
    data = {"id": user.pk, "email": user.email, "full_name": user.full_name}
    if with_role:
        data["role"] = user.role
    return data


# =============================================================================
# CATÁLOGO
# =============================================================================

class ProductCatalogView(APIView):
    """
    Catálogo público. Sem login os preços ficam ocultos; com login o tier de
    compra do usuário decide o que é exibido.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        data = CatalogService.get_catalog(
            request.user,
            category=request.query_params.get('category'),
            supplier=request.query_params.get('supplier'),
        )
        return Response(data, status=status.HTTP_200_OK)


class ProductListCreateView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        products = Products.objects.all()
        return Response(ProductAdminSerializer(products, many=True).data)

    def post(self, request):
        serializer = ProductAdminSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            product = ProductService.create_product(serializer.validated_data, user=request.user)
        except StoreError as e:
            return store_error_response(e)
        return Response(ProductAdminSerializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAdminRole()]

    def get(self, request, pk):
        product = get_object_or_404(Products, pk=pk, is_active=True)
        decision = purchase_decision_for_user(request.user)
        serializer = ProductSerializer(product, context={'prices_visible': decision.prices_visible})
        return Response(serializer.data)

    def patch(self, request, pk):
        product = get_object_or_404(Products, pk=pk)
        serializer = ProductAdminSerializer(product, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        product = ProductService.update_product(product, serializer.validated_data)
        return Response(ProductAdminSerializer(product).data)

    def delete(self, request, pk):
        product = get_object_or_404(Products, pk=pk)
        ProductService.deactivate_product(product)
        return Response({"message": "Produto removido do catálogo."}, status=status.HTTP_200_OK)


# =============================================================================
# ESTOQUE (somente admin)
# =============================================================================

class StockMovementListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        movements = StockLedger.movements()
        return Response(StockMovementSerializer(movements, many=True).data)


class StockMovementDetailView(APIView):
    """
    Uma movimentação com produto, usuário responsável e, nas vendas
    (referência ORD-<id>), o pedido e o cliente.
    """
    permission_classes = [IsAdminRole]

    def get(self, request, pk):
        movement = get_object_or_404(StockLedger.movements(), pk=pk)
        order = StockLedger.order_for(movement)

        return Response({
            "movement": StockMovementSerializer(movement).data,
            "product": ProductAdminSerializer(movement.product).data,
            "user": user_summary(movement.user, with_role=True),
            "order": OrderSerializer(order).data if order else None,
            "client": user_summary(order.user) if order else None,
        })


class ProductStockMovementsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, product_id):
        get_object_or_404(Products, pk=product_id)
        movements = StockLedger.movements(product_id)
        return Response(StockMovementSerializer(movements, many=True).data)


class StockHistoryView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, product_id):
        get_object_or_404(Products, pk=product_id)
        try:
            limit = int(request.query_params.get('limit', settings.STOCK_HISTORY_DEFAULT_LIMIT))
        except ValueError:
            return Response({"error": "Parâmetro 'limit' inválido."}, status=status.HTTP_400_BAD_REQUEST)

        history = StockLedger.history(product_id, limit=limit)
        return Response(StockMovementSerializer(history, many=True).data)


class StockSummaryView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(StockLedger.get_stock_summary().as_dict())


class LowStockView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        products = StockLedger.low_stock_products()
        return Response(ProductAdminSerializer(products, many=True).data)


class StockUpdateView(APIView):
    """
    Entrada, saída ou ajuste (delta) de estoque.
    """
    permission_classes = [IsAdminRole]

    def post(self, request):
        serializer = StockUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            movement = StockLedger.record_movement(
                data['product_id'],
                data['type'],
                data['quantity'],
                data.get('reason'),
                reference=data.get('reference'),
                notes=data.get('notes'),
                movement_date=data.get('movement_date'),
                user=request.user,
                batch_number=data.get('batch_number'),
                expiration_date=data.get('expiration_date'),
                cost_price=data.get('cost_price'),
                unit_value=data.get('unit_value'),
                total_value=data.get('total_value'),
                supplier=data.get('supplier'),
            )
        except StoreError as e:
            return store_error_response(e)
        return movement_response(movement)


class StockAdjustView(APIView):
    """
    Inventário físico: define o estoque em new_quantity.
    """
    permission_classes = [IsAdminRole]

    def post(self, request):
        serializer = StockAdjustSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            movement = StockLedger.record_adjustment(
                data['product_id'],
                data['new_quantity'],
                data.get('reason'),
                notes=data.get('notes'),
                user=request.user,
            )
        except StoreError as e:
            return store_error_response(e)
        return movement_response(movement)


class StockBulkUpdateView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request):
        serializer = BulkStockAdjustSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            movements = StockLedger.bulk_adjust(serializer.validated_data['updates'], user=request.user)
        except StoreError as e:
            return store_error_response(e)
        return Response(StockMovementSerializer(movements, many=True).data, status=status.HTTP_201_CREATED)


# =============================================================================
# PEDIDOS
# =============================================================================

class OrderView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        orders = Orders.objects.filter(user=request.user).prefetch_related('items__product')
        return Response(OrderSerializer(orders, many=True).data)

    def post(self, request):
        serializer = PlaceOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = OrderService.place_order(request.user, serializer.validated_data['items'])
        except StoreError as e:
            return store_error_response(e)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
