from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.constants import BLOOD_GROUPS
from core.exceptions import CapacityExceeded, DuplicateKey, InsufficientStock, NotFound, ValidationFailed
from .models import BloodInventory, StockStatus, classify_stock
from .services import InventoryService


class StockStatusTests(TestCase):
    def test_thresholds_against_minimum_stock(self):
        self.assertEqual(classify_stock(0, 5), StockStatus.OUT_OF_STOCK)
        self.assertEqual(classify_stock(1, 5), StockStatus.CRITICAL)
        self.assertEqual(classify_stock(5, 5), StockStatus.CRITICAL)
        self.assertEqual(classify_stock(6, 5), StockStatus.LOW)
        self.assertEqual(classify_stock(10, 5), StockStatus.LOW)
        self.assertEqual(classify_stock(11, 5), StockStatus.ADEQUATE)

    def test_same_levels_give_same_status(self):
        inventory = BloodInventory(blood_group='B+', units_available=7, minimum_stock=5)
        self.assertEqual(InventoryService.stock_status(inventory), InventoryService.stock_status(inventory))
        self.assertEqual(inventory.stock_status, StockStatus.LOW)

    def test_zero_minimum_stock(self):
        self.assertEqual(classify_stock(0, 0), StockStatus.OUT_OF_STOCK)
        self.assertEqual(classify_stock(1, 0), StockStatus.ADEQUATE)


class InventoryServiceTests(TestCase):
    def setUp(self):
        self.inventory = InventoryService.create('A+', units_available=10, minimum_stock=5, maximum_capacity=20)

    def test_credit_and_debit_respect_capacity(self):
        inventory = InventoryService.credit('A+', 8)
        self.assertEqual(inventory.units_available, 18)

        with self.assertRaises(CapacityExceeded):
            InventoryService.credit('A+', 5)
        self.assertEqual(InventoryService.get_by_blood_group('A+').units_available, 18)

        inventory = InventoryService.debit('A+', 18)
        self.assertEqual(inventory.units_available, 0)
        self.assertEqual(inventory.stock_status, StockStatus.OUT_OF_STOCK)

    def test_credit_up_to_exact_capacity(self):
        inventory = InventoryService.credit('A+', 10)
        self.assertEqual(inventory.units_available, 20)
        self.assertTrue(inventory.is_at_max_capacity)

    def test_debit_more_than_available_is_rejected(self):
        with self.assertRaises(InsufficientStock):
            InventoryService.debit('A+', 11)
        self.assertEqual(InventoryService.get_by_blood_group('A+').units_available, 10)

    def test_debit_then_credit_restores_units(self):
        InventoryService.debit('A+', 4)
        inventory = InventoryService.credit('A+', 4)
        self.assertEqual(inventory.units_available, 10)

    def test_units_must_be_positive(self):
        with self.assertRaises(ValidationFailed):
            InventoryService.credit('A+', 0)
        with self.assertRaises(ValidationFailed):
            InventoryService.debit('A+', -3)

    def test_unknown_blood_group(self):
        with self.assertRaises(NotFound):
            InventoryService.credit('B-', 1)
        with self.assertRaises(NotFound):
            InventoryService.debit('B-', 1)

    def test_notes_replaced_only_when_supplied(self):
        InventoryService.credit('A+', 1, notes='Drive at city hall')
        inventory = InventoryService.debit('A+', 1)
        self.assertEqual(inventory.notes, 'Drive at city hall')

    def test_duplicate_blood_group(self):
        with self.assertRaises(DuplicateKey):
            InventoryService.create('A+', units_available=1)

    def test_create_rejects_units_above_capacity(self):
        with self.assertRaises(ValidationFailed):
            InventoryService.create('O-', units_available=30, maximum_capacity=20)
        self.assertFalse(BloodInventory.objects.filter(blood_group='O-').exists())

    def test_create_uses_default_levels(self):
        inventory = InventoryService.create('O+', units_available=3)
        self.assertEqual(inventory.minimum_stock, 5)
        self.assertEqual(inventory.maximum_capacity, 100)

    def test_has_sufficient_units(self):
        self.assertTrue(InventoryService.has_sufficient_units('A+', 10))
        self.assertFalse(InventoryService.has_sufficient_units('A+', 11))
        self.assertFalse(InventoryService.has_sufficient_units('AB-', 1))

    def test_update_applies_only_supplied_fields(self):
        inventory = InventoryService.update(self.inventory.id, minimum_stock=2, notes=None)
        self.assertEqual(inventory.minimum_stock, 2)
        self.assertEqual(inventory.units_available, 10)
        self.assertEqual(inventory.maximum_capacity, 20)

    def test_update_clears_expiry_date_when_none_is_passed(self):
        InventoryService.update(self.inventory.id, expiry_date=timezone.now() + timedelta(days=30))
        inventory = InventoryService.update(self.inventory.id, expiry_date=None)
        self.assertIsNone(inventory.expiry_date)
        self.assertIsNone(InventoryService.get(self.inventory.id).expiry_date)

    def test_update_cannot_break_capacity(self):
        with self.assertRaises(ValidationFailed):
            InventoryService.update(self.inventory.id, maximum_capacity=5)
        self.assertEqual(InventoryService.get(self.inventory.id).maximum_capacity, 20)

    def test_delete(self):
        InventoryService.delete(self.inventory.id)
        with self.assertRaises(NotFound):
            InventoryService.get(self.inventory.id)
        with self.assertRaises(NotFound):
            InventoryService.delete(self.inventory.id)


class InventoryAggregateTests(TestCase):
    def test_total_units_when_empty(self):
        self.assertEqual(InventoryService.total_units(), 0)

    def test_initialize_is_idempotent(self):
        InventoryService.create('A+', units_available=10)

        created = InventoryService.initialize_all_groups()
        self.assertEqual(len(created), 7)
        self.assertNotIn('A+', created)
        self.assertEqual(BloodInventory.objects.count(), len(BLOOD_GROUPS))
        self.assertEqual(InventoryService.get_by_blood_group('A+').units_available, 10)
        self.assertEqual(InventoryService.get_by_blood_group('O-').notes, 'Initialized automatically')

        self.assertEqual(InventoryService.initialize_all_groups(), [])
        self.assertEqual(BloodInventory.objects.count(), len(BLOOD_GROUPS))

    def test_grouping_by_stock_status(self):
        InventoryService.create('A+', units_available=0)
        InventoryService.create('A-', units_available=3)
        InventoryService.create('B+', units_available=8)
        InventoryService.create('B-', units_available=40)

        self.assertEqual([inv.blood_group for inv in InventoryService.out_of_stock()], ['A+'])
        self.assertEqual([inv.blood_group for inv in InventoryService.by_stock_status(StockStatus.CRITICAL)], ['A-'])
        self.assertEqual([inv.blood_group for inv in InventoryService.low_stock()], ['B+'])
        self.assertEqual([inv.blood_group for inv in InventoryService.adequate_stock()], ['B-'])
        self.assertEqual(
            sorted(inv.blood_group for inv in InventoryService.critical_shortages()),
            ['A+', 'A-']
        )
        self.assertEqual(InventoryService.total_units(), 51)

    def test_status_is_recomputed_after_mutation(self):
        InventoryService.create('O+', units_available=20)
        self.assertEqual(len(InventoryService.adequate_stock()), 1)
        InventoryService.debit('O+', 17)
        self.assertEqual(len(InventoryService.adequate_stock()), 0)
        self.assertEqual(len(InventoryService.by_stock_status(StockStatus.CRITICAL)), 1)

    def test_unknown_stock_status(self):
        with self.assertRaises(ValidationFailed):
            InventoryService.by_stock_status('EMPTY')

    def test_statistics(self):
        InventoryService.create('A+', units_available=0)
        InventoryService.create('A-', units_available=4)
        InventoryService.create('O+', units_available=50)

        stats = InventoryService.statistics()
        self.assertEqual(stats['total_blood_groups'], 3)
        self.assertEqual(stats['total_units_available'], 54)
        self.assertEqual(stats['critical_shortage_count'], 2)
        self.assertEqual(stats['out_of_stock_count'], 1)
        self.assertEqual(stats['low_stock_count'], 0)
        self.assertEqual(stats['adequate_stock_count'], 1)

    def test_availability(self):
        InventoryService.create('AB+', units_available=0)
        InventoryService.create('AB-', units_available=12)
        availability = {row['blood_group']: row for row in InventoryService.availability()}
        self.assertFalse(availability['AB+']['available'])
        self.assertTrue(availability['AB-']['available'])
        self.assertEqual(availability['AB-']['status'], StockStatus.ADEQUATE)


class InventoryApiTests(APITestCase):
    def setUp(self):
        self.inventory = InventoryService.create('A+', units_available=10, minimum_stock=5, maximum_capacity=20)

    def test_create_inventory(self):
        response = self.client.post(reverse('inventory-list'), {
            'blood_group': 'O-',
            'units_available': 4,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'success')
        self.assertEqual(response.data['data']['stock_status'], 'CRITICAL')
        self.assertTrue(response.data['data']['is_critical_shortage'])

    def test_create_duplicate_inventory(self):
        response = self.client.post(reverse('inventory-list'), {
            'blood_group': 'A+',
            'units_available': 4,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['status'], 'error')
        self.assertIn('already exists', response.data['message'])

    def test_create_invalid_blood_group(self):
        response = self.client.post(reverse('inventory-list'), {
            'blood_group': 'C+',
            'units_available': 4,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('blood_group', response.data['errors'])

    def test_list_inventory(self):
        response = self.client.get(reverse('inventory-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)

    def test_add_units_over_capacity(self):
        url = reverse('inventory-add-units', kwargs={'blood_group': 'A+'})
        response = self.client.post(url, {'units': 11}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('maximum capacity', response.data['message'])
        self.assertEqual(InventoryService.get_by_blood_group('A+').units_available, 10)

    def test_add_and_remove_units(self):
        url = reverse('inventory-add-units', kwargs={'blood_group': 'A+'})
        response = self.client.post(url, {'units': 5, 'notes': 'Weekly drive'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['units_available'], 15)

        url = reverse('inventory-remove-units', kwargs={'blood_group': 'A+'})
        response = self.client.post(url, {'units': 15}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['stock_status'], 'OUT_OF_STOCK')

    def test_adjustment_limit(self):
        url = reverse('inventory-remove-units', kwargs={'blood_group': 'A+'})
        response = self.client.post(url, {'units': 51}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('units', response.data['errors'])

    def test_remove_units_unknown_group(self):
        url = reverse('inventory-remove-units', kwargs={'blood_group': 'B-'})
        response = self.client.post(url, {'units': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_check_availability(self):
        url = reverse('inventory-check-availability', kwargs={'blood_group': 'A+'})
        self.assertTrue(self.client.get(url, {'required_units': 10}).data['data'])
        self.assertFalse(self.client.get(url, {'required_units': 11}).data['data'])
        self.assertEqual(self.client.get(url).status_code, status.HTTP_400_BAD_REQUEST)

    def test_detail_not_found(self):
        response = self.client.get(reverse('inventory-detail', kwargs={'pk': 9999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['status'], 'error')

    def test_partial_update(self):
        url = reverse('inventory-detail', kwargs={'pk': self.inventory.id})
        response = self.client.put(url, {'minimum_stock': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['minimum_stock'], 1)
        self.assertEqual(response.data['data']['stock_status'], 'ADEQUATE')

    def test_put_null_expiry_date(self):
        InventoryService.update(self.inventory.id, expiry_date=timezone.now() + timedelta(days=30))
        url = reverse('inventory-detail', kwargs={'pk': self.inventory.id})
        response = self.client.put(url, {'expiry_date': None}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['data']['expiry_date'])
        self.assertEqual(response.data['data']['units_available'], 10)

    def test_initialize_and_statistics(self):
        response = self.client.post(reverse('inventory-initialize'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['initialized']), 7)

        stats = self.client.get(reverse('inventory-statistics')).data['data']
        self.assertEqual(stats['total_blood_groups'], 8)
        self.assertEqual(stats['total_units_available'], 10)
        self.assertEqual(stats['out_of_stock_count'], 7)

    def test_stock_query_endpoints(self):
        InventoryService.create('O-', units_available=0)
        response = self.client.get(reverse('inventory-out-of-stock'))
        self.assertEqual([row['blood_group'] for row in response.data['data']], ['O-'])
        response = self.client.get(reverse('inventory-low-stock'))
        self.assertEqual([row['blood_group'] for row in response.data['data']], ['A+'])
