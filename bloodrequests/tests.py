from datetime import timedelta
from unittest import mock

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import (
    AlreadyProcessed,
    FulfillmentFailed,
    InsufficientStock,
    NotFound,
    ValidationFailed,
)
from inventory.services import InventoryService
from .models import BloodRequest, RequestStatus, UrgencyLevel
from .services import BloodRequestService


def request_fields(**overrides):
    fields = {
        'requester_name': 'Dr. Osei',
        'contact_email': 'osei@stmarys.example.com',
        'contact_phone': '+15551230000',
        'blood_group': 'O-',
        'units_requested': 2,
        'urgency_level': UrgencyLevel.NORMAL,
        'hospital_name': "St Mary's Hospital",
        'patient_name': 'John Park',
        'medical_reason': 'Scheduled surgery',
    }
    fields.update(overrides)
    return fields


def backdate(blood_request, **delta):
    BloodRequest.objects.filter(pk=blood_request.pk).update(created_at=timezone.now() - timedelta(**delta))


class BloodRequestWorkflowTests(TestCase):
    def test_create_is_pending(self):
        blood_request = BloodRequestService.create(**request_fields(status=RequestStatus.FULFILLED))
        self.assertEqual(blood_request.status, RequestStatus.PENDING)
        self.assertIsNone(blood_request.processed_at)

    def test_create_enforces_field_bounds(self):
        invalid = {
            'units_requested': 0,
            'blood_group': 'ZZ',
            'contact_phone': 'abc',
            'urgency_level': 'SOMEDAY',
        }
        for field, value in invalid.items():
            with self.subTest(field=field):
                with self.assertRaises(ValidationFailed) as ctx:
                    BloodRequestService.create(**request_fields(**{field: value}))
                self.assertIn(field, ctx.exception.errors)
        with self.assertRaises(ValidationFailed):
            BloodRequestService.create(**request_fields(units_requested=11))
        self.assertEqual(BloodRequest.objects.count(), 0)

    def test_processing_twice_without_lock_is_rejected(self):
        blood_request = BloodRequestService.create(**request_fields())
        blood_request.mark_as_processed('admin', RequestStatus.REJECTED)
        with self.assertRaises(AlreadyProcessed):
            blood_request.mark_as_processed('admin', RequestStatus.APPROVED)
        self.assertEqual(BloodRequestService.get(blood_request.id).status, RequestStatus.REJECTED)

    def test_approve_without_stock(self):
        InventoryService.create('O-', units_available=0)
        blood_request = BloodRequestService.create(**request_fields())

        with self.assertRaises(InsufficientStock):
            BloodRequestService.update_status(blood_request.id, RequestStatus.APPROVED, processed_by='admin')

        blood_request.refresh_from_db()
        self.assertEqual(blood_request.status, RequestStatus.PENDING)
        self.assertEqual(blood_request.processed_by, '')

    def test_approve_does_not_move_inventory(self):
        InventoryService.create('O-', units_available=5)
        blood_request = BloodRequestService.create(**request_fields())

        blood_request = BloodRequestService.update_status(
            blood_request.id, RequestStatus.APPROVED, admin_notes='ok', processed_by='admin')

        self.assertEqual(blood_request.status, RequestStatus.APPROVED)
        self.assertEqual(blood_request.processed_by, 'admin')
        self.assertIsNotNone(blood_request.processed_at)
        self.assertEqual(InventoryService.get_by_blood_group('O-').units_available, 5)

    def test_reject_needs_no_stock(self):
        blood_request = BloodRequestService.create(**request_fields())
        blood_request = BloodRequestService.update_status(
            blood_request.id, RequestStatus.REJECTED, admin_notes='Duplicate', processed_by='admin')
        self.assertEqual(blood_request.status, RequestStatus.REJECTED)
        self.assertEqual(blood_request.admin_notes, 'Duplicate')

    def test_transition_happens_exactly_once(self):
        blood_request = BloodRequestService.create(**request_fields())
        BloodRequestService.update_status(blood_request.id, RequestStatus.REJECTED, processed_by='admin')

        with self.assertRaises(AlreadyProcessed):
            BloodRequestService.update_status(blood_request.id, RequestStatus.APPROVED, processed_by='admin')
        with self.assertRaises(AlreadyProcessed):
            BloodRequestService.approve_and_fulfill(blood_request.id, processed_by='admin')
        with self.assertRaises(AlreadyProcessed):
            BloodRequestService.cancel(blood_request.id, 'Too late')

    def test_pending_is_not_a_target(self):
        blood_request = BloodRequestService.create(**request_fields())
        with self.assertRaises(ValidationFailed):
            BloodRequestService.update_status(blood_request.id, RequestStatus.PENDING)
        with self.assertRaises(ValidationFailed):
            BloodRequestService.update_status(blood_request.id, 'ON_HOLD')

    def test_missing_request(self):
        with self.assertRaises(NotFound):
            BloodRequestService.update_status(404, RequestStatus.REJECTED)
        with self.assertRaises(NotFound):
            BloodRequestService.get(404)

    def test_fulfil_with_insufficient_stock(self):
        InventoryService.create('O-', units_available=3)
        blood_request = BloodRequestService.create(**request_fields(units_requested=5))

        with self.assertRaises(InsufficientStock):
            BloodRequestService.approve_and_fulfill(blood_request.id, processed_by='admin')

        blood_request.refresh_from_db()
        self.assertEqual(blood_request.status, RequestStatus.PENDING)
        self.assertEqual(InventoryService.get_by_blood_group('O-').units_available, 3)

    def test_fulfil_debits_inventory(self):
        InventoryService.create('O-', units_available=8)
        blood_request = BloodRequestService.create(**request_fields(units_requested=5))

        blood_request = BloodRequestService.approve_and_fulfill(
            blood_request.id, admin_notes='Sent by courier', processed_by='admin')

        self.assertEqual(blood_request.status, RequestStatus.FULFILLED)
        self.assertEqual(blood_request.admin_notes, 'Sent by courier')
        inventory = InventoryService.get_by_blood_group('O-')
        self.assertEqual(inventory.units_available, 3)
        self.assertEqual(inventory.notes, f"Units deducted for approved request ID: {blood_request.id}")

    def test_failed_debit_leaves_request_pending(self):
        InventoryService.create('O-', units_available=1)
        blood_request = BloodRequestService.create(**request_fields(units_requested=4))

        with mock.patch.object(InventoryService, 'has_sufficient_units', return_value=True):
            with self.assertRaises(FulfillmentFailed):
                BloodRequestService.approve_and_fulfill(blood_request.id, processed_by='admin')

        blood_request.refresh_from_db()
        self.assertEqual(blood_request.status, RequestStatus.PENDING)
        self.assertEqual(InventoryService.get_by_blood_group('O-').units_available, 1)

    def test_failed_debit_without_inventory_row(self):
        blood_request = BloodRequestService.create(**request_fields())

        with mock.patch.object(InventoryService, 'has_sufficient_units', return_value=True):
            with self.assertRaises(FulfillmentFailed):
                BloodRequestService.approve_and_fulfill(blood_request.id, processed_by='admin')

        self.assertTrue(BloodRequestService.get(blood_request.id).is_pending)

    def test_cancel_is_processed_by_system(self):
        blood_request = BloodRequestService.create(**request_fields())
        blood_request = BloodRequestService.cancel(blood_request.id, 'Patient transferred')
        self.assertEqual(blood_request.status, RequestStatus.CANCELLED)
        self.assertEqual(blood_request.processed_by, 'System')
        self.assertEqual(blood_request.admin_notes, 'Patient transferred')

    def test_delete(self):
        blood_request = BloodRequestService.create(**request_fields())
        BloodRequestService.delete(blood_request.id)
        with self.assertRaises(NotFound):
            BloodRequestService.delete(blood_request.id)


class BloodRequestQueryTests(TestCase):
    def setUp(self):
        self.old_normal = BloodRequestService.create(**request_fields(patient_name='Old Normal'))
        self.old_emergency = BloodRequestService.create(**request_fields(
            patient_name='Old Emergency', urgency_level=UrgencyLevel.EMERGENCY, blood_group='A+'))
        self.older_urgent = BloodRequestService.create(**request_fields(
            patient_name='Older Urgent', urgency_level=UrgencyLevel.URGENT, units_requested=4))
        self.fresh = BloodRequestService.create(**request_fields(
            patient_name='Fresh', urgency_level=UrgencyLevel.EMERGENCY, hospital_name='City General',
            contact_email='desk@citygeneral.example.com'))
        backdate(self.old_normal, hours=30)
        backdate(self.old_emergency, hours=26)
        backdate(self.older_urgent, days=3)

    def test_overdue_ordered_by_urgency_then_age(self):
        overdue = BloodRequestService.overdue_pending()
        self.assertEqual([r.patient_name for r in overdue], ['Old Emergency', 'Older Urgent', 'Old Normal'])
        self.assertEqual(BloodRequestService.overdue_pending_count(), 3)

    def test_processed_requests_are_not_overdue(self):
        BloodRequestService.cancel(self.old_normal.id, 'Resolved elsewhere')
        self.assertEqual(BloodRequestService.overdue_pending_count(), 2)

    def test_pending_oldest_first(self):
        self.assertEqual(BloodRequestService.pending()[0].patient_name, 'Older Urgent')
        self.assertEqual(BloodRequestService.pending_count(), 4)

    def test_emergency_pending(self):
        names = [r.patient_name for r in BloodRequestService.emergency_pending()]
        self.assertEqual(names, ['Old Emergency', 'Fresh'])
        self.assertEqual(BloodRequestService.emergency_pending_count(), 2)

    def test_recent_window(self):
        backdate(self.old_normal, days=8)
        names = [r.patient_name for r in BloodRequestService.recent()]
        self.assertEqual(names, ['Fresh', 'Old Emergency', 'Older Urgent'])

    def test_created_today(self):
        backdate(self.fresh, days=2)
        backdate(self.old_emergency, days=2)
        backdate(self.old_normal, days=2)
        BloodRequestService.create(**request_fields(patient_name='Walk In'))
        self.assertEqual(BloodRequestService.created_today_count(), 1)

    def test_search_hospital_or_patient(self):
        self.assertEqual([r.patient_name for r in BloodRequestService.search('city')], ['Fresh'])
        self.assertEqual([r.patient_name for r in BloodRequestService.search('older')], ['Older Urgent'])

    def test_filters(self):
        self.assertEqual(len(BloodRequestService.by_blood_group('A+')), 1)
        self.assertEqual(len(BloodRequestService.by_email('DESK@citygeneral.example.com')), 1)
        self.assertEqual(len(BloodRequestService.by_status(RequestStatus.PENDING)), 4)

    def test_statistics(self):
        BloodRequestService.update_status(self.old_normal.id, RequestStatus.REJECTED, processed_by='admin')
        stats = BloodRequestService.statistics()
        self.assertEqual(stats, {
            'total_requests': 4,
            'pending_requests': 3,
            'approved_requests': 0,
            'rejected_requests': 1,
            'emergency_requests': 2,
            'urgent_requests': 1,
        })

    def test_blood_group_statistics(self):
        BloodRequestService.cancel(self.old_normal.id, 'Resolved elsewhere')
        stats = {row['blood_group']: row for row in BloodRequestService.blood_group_statistics()}
        self.assertEqual(list(stats), ['A+', 'O-'])
        self.assertEqual(stats['O-'], {
            'blood_group': 'O-',
            'total_requests': 3,
            'total_units_requested': 8,
            'pending_requests': 2,
            'pending_units': 6,
        })
        self.assertEqual(stats['A+']['pending_units'], 2)


class BloodRequestApiTests(APITestCase):
    def test_create_request(self):
        response = self.client.post(reverse('request-list'), request_fields(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], 'PENDING')
        self.assertEqual(response.data['data']['status_display'], 'Pending Review')

    def test_create_validation(self):
        payload = request_fields(units_requested=11, contact_phone='abc')
        del payload['urgency_level']
        response = self.client.post(reverse('request-list'), payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.data['errors']), {'units_requested', 'contact_phone', 'urgency_level'})

    def test_status_update_rejects_pending_target(self):
        blood_request = BloodRequestService.create(**request_fields())
        url = reverse('request-status', kwargs={'pk': blood_request.id})
        response = self.client.put(url, {'status': 'PENDING', 'processed_by': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data['errors'])

    def test_approve_fulfill_flow(self):
        InventoryService.create('O-', units_available=10)
        blood_request = BloodRequestService.create(**request_fields(units_requested=3))
        url = reverse('request-approve-fulfill', kwargs={'pk': blood_request.id})

        response = self.client.put(url, {'processed_by': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], 'FULFILLED')

        response = self.client.put(url, {'processed_by': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Blood request has already been processed')
        self.assertEqual(InventoryService.get_by_blood_group('O-').units_available, 7)

    def test_cancel_requires_reason(self):
        blood_request = BloodRequestService.create(**request_fields())
        url = reverse('request-cancel', kwargs={'pk': blood_request.id})
        response = self.client.put(url, {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.put(url, {'reason': 'No longer needed'}, format='json')
        self.assertEqual(response.data['data']['processed_by'], 'System')

    def test_missing_request(self):
        response = self.client.get(reverse('request-detail', kwargs={'pk': 99}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['status'], 'error')

    def test_list_filtered_by_status(self):
        BloodRequestService.create(**request_fields())
        cancelled = BloodRequestService.create(**request_fields())
        BloodRequestService.cancel(cancelled.id, 'Duplicate')
        response = self.client.get(reverse('request-list'), {'status': 'CANCELLED'})
        self.assertEqual([row['id'] for row in response.data['data']], [cancelled.id])

    def test_blood_group_statistics_endpoint(self):
        BloodRequestService.create(**request_fields(blood_group='B+'))
        response = self.client.get(reverse('request-statistics-blood-groups'))
        self.assertEqual(response.data['data'][0]['blood_group'], 'B+')
        self.assertEqual(response.data['data'][0]['total_units_requested'], 2)
