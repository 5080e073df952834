from datetime import timedelta

from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from bloodrequests.models import BloodRequest, UrgencyLevel
from bloodrequests.services import BloodRequestService
from donors.services import DonorService
from inventory.services import InventoryService
from .services import CRITICAL, HEALTHY, WARNING, DashboardService, classify_health


def create_request(urgency_level=UrgencyLevel.NORMAL, hours_old=0, **overrides):
    fields = {
        'requester_name': 'Ward Nurse',
        'contact_email': 'ward@example.com',
        'contact_phone': '5551234567',
        'blood_group': 'B+',
        'units_requested': 1,
        'urgency_level': urgency_level,
        'hospital_name': 'General Hospital',
        'patient_name': 'Patient',
    }
    fields.update(overrides)
    blood_request = BloodRequestService.create(**fields)
    if hours_old:
        BloodRequest.objects.filter(pk=blood_request.pk).update(
            created_at=timezone.now() - timedelta(hours=hours_old))
    return blood_request


class ClassifyHealthTests(TestCase):
    def test_emergency_is_critical(self):
        self.assertEqual(classify_health(1, 0, 0), CRITICAL)

    def test_overdue_backlog_threshold(self):
        self.assertEqual(classify_health(0, 5, 0), HEALTHY)
        self.assertEqual(classify_health(0, 6, 1), CRITICAL)

    def test_shortages_threshold(self):
        self.assertEqual(classify_health(0, 0, 3), HEALTHY)
        self.assertEqual(classify_health(0, 0, 4), WARNING)

    @override_settings(BLOOD_BANK={'SHORTAGE_WARNING_THRESHOLD': 0})
    def test_thresholds_from_settings(self):
        self.assertEqual(classify_health(0, 0, 1), WARNING)


class DashboardServiceTests(TestCase):
    def test_empty_system_is_healthy(self):
        self.assertEqual(DashboardService.get_health_status(), HEALTHY)
        stats = DashboardService.get_dashboard_stats()
        self.assertEqual(set(stats.values()), {0})

    def test_overdue_backlog_is_critical(self):
        InventoryService.create('AB-', units_available=1)
        for _ in range(6):
            create_request(hours_old=30)
        self.assertEqual(DashboardService.get_health_status(), CRITICAL)

    def test_shortages_raise_warning(self):
        for blood_group in ('A-', 'B-', 'AB-', 'O-'):
            InventoryService.create(blood_group, units_available=2)
        self.assertEqual(DashboardService.get_health_status(), WARNING)

    def test_pending_emergency_is_critical(self):
        emergency = create_request(urgency_level=UrgencyLevel.EMERGENCY)
        self.assertEqual(DashboardService.get_health_status(), CRITICAL)
        BloodRequestService.cancel(emergency.id, 'Handled by another bank')
        self.assertEqual(DashboardService.get_health_status(), HEALTHY)

    def test_dashboard_stats(self):
        DonorService.register(
            name='Lena Ortiz', email='lena@example.com', phone='5550001111', blood_group='O+',
            age=40, weight=70, address='1 Elm Street',
            last_donation_date=timezone.localdate() - timedelta(days=5))
        idle = DonorService.register(
            name='Sam Reed', email='sam@example.com', phone='5550002222', blood_group='A-',
            age=25, weight=80, address='2 Oak Street')
        DonorService.update(idle.id, is_eligible=False)
        InventoryService.create('O+', units_available=40)
        InventoryService.create('A-', units_available=3)
        create_request(urgency_level=UrgencyLevel.EMERGENCY)
        create_request(hours_old=72)

        self.assertEqual(DashboardService.get_dashboard_stats(), {
            'total_donors': 2,
            'eligible_donors': 1,
            'total_blood_units': 43,
            'critical_shortages': 1,
            'pending_requests': 2,
            'emergency_requests': 1,
            'today_requests': 1,
            'today_donations': 1,
        })


class DashboardApiTests(APITestCase):
    def test_stats_endpoint(self):
        response = self.client.get(reverse('dashboard:stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'success')
        self.assertEqual(response.data['data']['total_blood_units'], 0)

    def test_health_endpoint(self):
        create_request(urgency_level=UrgencyLevel.EMERGENCY)
        response = self.client.get(reverse('dashboard:health'))
        self.assertEqual(response.data['data'], 'CRITICAL')
