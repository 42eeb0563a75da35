from decimal import Decimal
from unittest.mock import MagicMock

from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory, TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.medical.models import PatientDocuments
from apps.store.admin import ProductAdmin
from apps.store.models import Orders, Products, StockMovements
from apps.store.services import SALE_REASON, ProductService, StockLedger

Approved = PatientDocuments.Status.APPROVED


def make_product(stock=10, price='120.00', name='Óleo CBD 20mg/ml', **extra):
    data = {'name': name, 'category': Products.Category.OIL, 'price': Decimal(price), 'initial_stock': stock}
    data.update(extra)
    return ProductService.create_product(data)


class StoreAPITestCase(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email='admin@loja.com', password='x', role=User.Role.ADMIN)
        self.patient = User.objects.create_user(email='paciente@loja.com', password='x', full_name='Maria')
        self.vendor = User.objects.create_user(email='vendedor@loja.com', password='x', role=User.Role.VENDOR)

    def unlock(self, user):
        PatientDocuments.objects.update_or_create(patient=user, defaults={
            'prescription_url': 'https://docs.example.com/receita.pdf',
            'prescription_status': Approved,
            'anvisa_document_url': 'https://docs.example.com/anvisa.pdf',
            'anvisa_status': Approved,
        })


class CatalogTests(StoreAPITestCase):

    def setUp(self):
        super().setUp()
        self.product = make_product()
        make_product(name='Produto fora de linha', is_active=False)

    def test_anonymous_catalog_hides_prices(self):
        response = self.client.get('/api/store/catalog/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['tier'], 'anonymous')
        self.assertFalse(response.data['canPurchase'])
        self.assertFalse(response.data['hasUploadedPrescription'])
        self.assertFalse(response.data['pricesVisible'])
        self.assertEqual(len(response.data['products']), 1)
        self.assertIsNone(response.data['products'][0]['price'])

    def test_prescription_upload_reveals_prices_but_not_cart(self):
        self.client.force_authenticate(self.patient)

        before = self.client.get('/api/store/catalog/')
        self.assertEqual(before.data['tier'], 'prescription_required')
        self.assertIsNone(before.data['products'][0]['price'])

        upload = self.client.post(
            '/api/medical/documents/prescription/',
            {'url': 'https://docs.example.com/receita.pdf'},
            format='json',
        )
        self.assertEqual(upload.status_code, status.HTTP_201_CREATED)

        after = self.client.get('/api/store/catalog/')
        self.assertTrue(after.data['hasUploadedPrescription'])
        self.assertTrue(after.data['pricesVisible'])
        self.assertFalse(after.data['canPurchase'])
        self.assertEqual(after.data['tier'], 'anvisa_required')
        self.assertEqual(after.data['products'][0]['price'], '120.00')

    def test_unlocked_patient_can_purchase(self):
        self.unlock(self.patient)
        self.client.force_authenticate(self.patient)
        response = self.client.get('/api/store/catalog/')
        self.assertEqual(response.data['tier'], 'unlocked')
        self.assertTrue(response.data['canPurchase'])

    def test_vendor_sees_prices_but_cannot_buy(self):
        self.client.force_authenticate(self.vendor)
        response = self.client.get('/api/store/catalog/')
        self.assertEqual(response.data['tier'], 'view_only')
        self.assertTrue(response.data['pricesVisible'])
        self.assertFalse(response.data['canPurchase'])

    def test_category_filter(self):
        make_product(name='Goma', category=Products.Category.GUMMIES)
        response = self.client.get('/api/store/catalog/', {'category': 'gummies'})
        self.assertEqual([p['name'] for p in response.data['products']], ['Goma'])

    def test_product_detail_respects_gate(self):
        url = f'/api/store/products/{self.product.pk}/'
        self.assertIsNone(self.client.get(url).data['price'])

        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get(url).data['price'], '120.00')


class ProductAdminTests(StoreAPITestCase):

    def test_create_product_records_initial_stock(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/store/products/', {
            'name': 'Creme CBD',
            'category': 'cream',
            'price': '89.90',
            'minimum_stock': 10,
            'initial_stock': 50,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['stock_quantity'], 50)
        movement = StockMovements.objects.get(product_id=response.data['id'])
        self.assertEqual(movement.new_quantity, 50)
        self.assertEqual(movement.user, self.admin)

    def test_patch_cannot_write_stock_directly(self):
        product = make_product(stock=10)
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            f'/api/store/products/{product.pk}/', {'stock_quantity': 999, 'price': '150.00'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 10)
        self.assertEqual(product.price, Decimal('150.00'))

    def test_patch_rejects_initial_stock(self):
        product = make_product(stock=10)
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            f'/api/store/products/{product.pk}/', {'initial_stock': 50, 'price': '150.00'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('initial_stock', response.data)

        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 10)
        self.assertEqual(product.price, Decimal('120.00'))
        self.assertEqual(StockMovements.objects.filter(product=product).count(), 1)

    def test_admin_form_save_keeps_stock_moved_meanwhile(self):
        product = make_product(stock=10)
        stale = Products.objects.get(pk=product.pk)

        # Venda entre a abertura e o envio do formulário do admin
        StockLedger.record_movement(product.pk, StockMovements.Type.OUT, 4, SALE_REASON)

        stale.price = Decimal('150.00')
        request = RequestFactory().post('/admin/store/products/')
        request.user = self.admin
        form = MagicMock(changed_data=['price'])
        ProductAdmin(Products, AdminSite()).save_model(request, stale, form, change=True)

        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 6)
        self.assertEqual(product.price, Decimal('150.00'))
        self.assertEqual(StockMovements.objects.filter(product=product).latest('id').new_quantity, 6)

    def test_delete_only_deactivates(self):
        product = make_product()
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/store/products/{product.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertFalse(product.is_active)
        self.assertTrue(StockMovements.objects.filter(product=product).exists())

    def test_non_admin_cannot_manage_products(self):
        self.client.force_authenticate(self.vendor)
        self.assertEqual(self.client.get('/api/store/products/').status_code, status.HTTP_403_FORBIDDEN)


class StockEndpointTests(StoreAPITestCase):

    def setUp(self):
        super().setUp()
        self.product = make_product(stock=5)

    def post_update(self, **payload):
        body = {'product_id': self.product.pk, 'type': 'in', 'quantity': 1, 'reason': 'Compra'}
        body.update(payload)
        return self.client.post('/api/store/stock/update/', body, format='json')

    def test_requires_admin(self):
        self.assertEqual(self.post_update().status_code, status.HTTP_401_UNAUTHORIZED)
        self.client.force_authenticate(self.patient)
        self.assertEqual(self.post_update().status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get('/api/store/stock/summary/').status_code, status.HTTP_403_FORBIDDEN)

    def test_update_returns_movement_and_new_quantity(self):
        self.client.force_authenticate(self.admin)
        response = self.post_update(type='in', quantity=7, reference='NF-9')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['stock_quantity'], 12)
        self.assertEqual(response.data['movement']['previous_quantity'], 5)
        self.assertEqual(response.data['movement']['reference'], 'NF-9')

    def test_error_codes(self):
        self.client.force_authenticate(self.admin)
        cases = [
            ({'type': 'out', 'quantity': 10}, status.HTTP_409_CONFLICT, 'insufficient_stock'),
            ({'quantity': 0}, status.HTTP_400_BAD_REQUEST, 'invalid_quantity'),
            ({'reason': ''}, status.HTTP_400_BAD_REQUEST, 'missing_reason'),
            ({'product_id': 987654}, status.HTTP_404_NOT_FOUND, 'product_not_found'),
        ]
        for payload, expected_status, code in cases:
            with self.subTest(code=code):
                response = self.post_update(**payload)
                self.assertEqual(response.status_code, expected_status)
                self.assertEqual(response.data['code'], code)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_long_reason_and_reference_limit(self):
        self.client.force_authenticate(self.admin)
        long_reason = 'Recebimento parcial do fornecedor, conferido por lote. ' * 6

        response = self.post_update(reason=long_reason)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['movement']['reason'], long_reason.strip())

        too_long = self.post_update(reference='NF-' + '9' * 98)
        self.assertEqual(too_long.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('reference', too_long.data)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 6)

    def test_update_records_batch_and_values(self):
        self.client.force_authenticate(self.admin)
        response = self.post_update(
            quantity=4, reference='NF-1234', batch_number='L-2026-07', expiration_date='2027-06-30',
            cost_price='55.00', unit_value='60.00', supplier='Farmácia Viva',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        movement = response.data['movement']
        self.assertEqual(movement['batch_number'], 'L-2026-07')
        self.assertEqual(movement['expiration_date'], '2027-06-30')
        self.assertEqual(movement['cost_price'], '55.00')
        self.assertEqual(movement['unit_value'], '60.00')
        self.assertEqual(movement['total_value'], '240.00')
        self.assertEqual(movement['supplier'], 'Farmácia Viva')
        self.assertEqual(response.data['stock_quantity'], 9)

        negative = self.post_update(unit_value='-1.00')
        self.assertEqual(negative.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('unit_value', negative.data)

    def test_movement_detail(self):
        self.client.force_authenticate(self.admin)
        created = self.post_update(quantity=2, reference='NF-77')
        movement_id = created.data['movement']['id']

        response = self.client.get(f'/api/store/stock/movements/{movement_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['movement']['reference'], 'NF-77')
        self.assertEqual(response.data['product']['id'], self.product.pk)
        self.assertEqual(response.data['user']['email'], 'admin.com')
        self.assertEqual(response.data['user']['role'], User.Role.ADMIN)
        self.assertIsNone(response.data['order'])
        self.assertIsNone(response.data['client'])

        self.assertEqual(
            self.client.get('/api/store/stock/movements/987654/').status_code, status.HTTP_404_NOT_FOUND,
        )
        self.client.force_authenticate(self.patient)
        self.assertEqual(
            self.client.get(f'/api/store/stock/movements/{movement_id}/').status_code, status.HTTP_403_FORBIDDEN,
        )

    def test_adjust_and_history(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/store/stock/adjust/', {
            'product_id': self.product.pk, 'new_quantity': 2, 'reason': 'Inventário',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['movement']['quantity'], -3)

        negative = self.client.post('/api/store/stock/adjust/', {
            'product_id': self.product.pk, 'new_quantity': -1, 'reason': 'Inventário',
        }, format='json')
        self.assertEqual(negative.data['code'], 'invalid_quantity')

        history = self.client.get(f'/api/store/stock/history/{self.product.pk}/', {'limit': 1})
        self.assertEqual(len(history.data), 1)
        self.assertEqual(history.data[0]['reason'], 'Inventário')

        invalid = self.client.get(f'/api/store/stock/history/{self.product.pk}/', {'limit': 'muitos'})
        self.assertEqual(invalid.status_code, status.HTTP_400_BAD_REQUEST)

    def test_summary_and_low_stock(self):
        make_product(stock=100, minimum_stock=20, name='Estoque alto', price='10.00')
        self.client.force_authenticate(self.admin)

        summary = self.client.get('/api/store/stock/summary/')
        self.assertEqual(summary.data['total_products'], 2)
        self.assertEqual(summary.data['low_stock_products'], 1)
        self.assertEqual(summary.data['total_stock_value'], '1600.00')

        low = self.client.get('/api/store/stock/low-stock/')
        self.assertEqual([p['id'] for p in low.data], [self.product.pk])

    def test_bulk_update(self):
        other = make_product(stock=3, name='Goma')
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/store/stock/bulk-update/', {'updates': [
            {'product_id': self.product.pk, 'new_quantity': 8, 'reason': 'Inventário'},
            {'product_id': other.pk, 'new_quantity': 0, 'reason': 'Inventário'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data), 2)

    def test_movement_listing(self):
        self.client.force_authenticate(self.admin)
        self.post_update(quantity=2)
        response = self.client.get(f'/api/store/stock/movements/product/{self.product.pk}/')
        self.assertEqual(len(response.data), 2)
        self.assertEqual(len(self.client.get('/api/store/stock/movements/').data), 2)


class OrderTests(StoreAPITestCase):

    def setUp(self):
        super().setUp()
        self.product = make_product(stock=5, price='100.00')

    def place(self, quantity):
        return self.client.post('/api/store/orders/', {
            'items': [{'product_id': self.product.pk, 'quantity': quantity}],
        }, format='json')

    def test_locked_patient_cannot_order(self):
        self.client.force_authenticate(self.patient)
        response = self.place(1)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'purchase_not_allowed')
        self.assertEqual(response.data['tier'], 'prescription_required')
        self.assertFalse(Orders.objects.exists())

    def test_order_goes_out_through_the_ledger(self):
        self.unlock(self.patient)
        self.client.force_authenticate(self.patient)

        response = self.place(2)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '200.00')

        order = Orders.objects.get()
        movement = StockMovements.objects.get(product=self.product, type=StockMovements.Type.OUT)
        self.assertEqual(movement.reference, f'ORD-{order.pk}')
        self.assertEqual(movement.reason, SALE_REASON)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)

        listing = self.client.get('/api/store/orders/')
        self.assertEqual(len(listing.data), 1)

    def test_sale_movement_carries_values_and_order(self):
        self.unlock(self.patient)
        self.client.force_authenticate(self.patient)
        self.place(2)

        order = Orders.objects.get()
        movement = StockMovements.objects.get(product=self.product, type=StockMovements.Type.OUT)
        self.assertEqual(movement.unit_value, Decimal('100.00'))
        self.assertEqual(movement.total_value, Decimal('200.00'))

        self.client.force_authenticate(self.admin)
        response = self.client.get(f'/api/store/stock/movements/{movement.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order']['reference'], order.reference)
        self.assertEqual(response.data['order']['total_amount'], '200.00')
        self.assertEqual(response.data['client'], {
            'id': self.patient.pk, 'email': 'paciente.com', 'full_name': 'Maria',
        })

    def test_insufficient_stock_rolls_back_order(self):
        self.unlock(self.patient)
        self.client.force_authenticate(self.patient)

        response = self.place(6)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(Orders.objects.exists())
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_vendor_cannot_order(self):
        self.client.force_authenticate(self.vendor)
        self.assertEqual(self.place(1).status_code, status.HTTP_403_FORBIDDEN)
