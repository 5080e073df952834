from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import Conflict, DuplicateKey, NotFound, ValidationFailed
from .models import Donor
from .services import DonorService


def donor_fields(**overrides):
    fields = {
        'name': 'Amina Yusuf',
        'email': 'amina@example.com',
        'phone': '+15550000001',
        'blood_group': 'O+',
        'age': 30,
        'weight': 62.5,
        'address': '12 Harbour Road',
    }
    fields.update(overrides)
    return fields


def days_ago(days):
    return timezone.localdate() - timedelta(days=days)


class CanDonateTests(TestCase):
    def test_donation_interval_boundary_is_exclusive(self):
        self.assertTrue(Donor(is_eligible=True, last_donation_date=days_ago(57)).can_donate)
        self.assertFalse(Donor(is_eligible=True, last_donation_date=days_ago(56)).can_donate)
        self.assertFalse(Donor(is_eligible=True, last_donation_date=days_ago(10)).can_donate)

    def test_never_donated(self):
        self.assertTrue(DonorService.can_donate(Donor(is_eligible=True, last_donation_date=None)))

    def test_ineligible_flag_always_blocks(self):
        self.assertFalse(Donor(is_eligible=False, last_donation_date=None).can_donate)
        self.assertFalse(Donor(is_eligible=False, last_donation_date=days_ago(365)).can_donate)


class DonorServiceTests(TestCase):
    def setUp(self):
        self.donor = DonorService.register(**donor_fields())

    def test_register_defaults_to_eligible(self):
        self.assertTrue(self.donor.is_eligible)
        self.assertIsNone(self.donor.last_donation_date)

    def test_duplicate_email(self):
        with self.assertRaises(DuplicateKey):
            DonorService.register(**donor_fields(phone='+15550000002'))

    def test_duplicate_phone(self):
        with self.assertRaises(DuplicateKey):
            DonorService.register(**donor_fields(email='other@example.com'))

    def test_duplicate_email_differing_only_in_case(self):
        with self.assertRaises(DuplicateKey):
            DonorService.register(**donor_fields(email='Amina@Example.COM', phone='+15550000002'))
        self.assertEqual(DonorService.get_by_email('AMINA@EXAMPLE.COM').id, self.donor.id)

    def test_register_enforces_field_bounds(self):
        invalid = {
            'age': 17,
            'weight': 49.9,
            'blood_group': 'Q',
            'phone': '12',
            'name': 'A',
        }
        for field, value in invalid.items():
            overrides = {'email': 'new@example.com', 'phone': '+15550000003', field: value}
            with self.subTest(field=field):
                with self.assertRaises(ValidationFailed) as ctx:
                    DonorService.register(**donor_fields(**overrides))
                self.assertIn(field, ctx.exception.errors)
        with self.assertRaises(ValidationFailed):
            DonorService.register(**donor_fields(email='new@example.com', phone='+15550000003', age=66))
        self.assertEqual(Donor.objects.count(), 1)

    def test_update_enforces_field_bounds(self):
        with self.assertRaises(ValidationFailed):
            DonorService.update(self.donor.id, age=70)
        self.assertEqual(DonorService.get(self.donor.id).age, 30)

    def test_update_applies_only_supplied_fields(self):
        donor = DonorService.update(self.donor.id, address='7 Hill Street', age=None)
        self.assertEqual(donor.address, '7 Hill Street')
        self.assertEqual(donor.age, 30)
        self.assertEqual(donor.name, 'Amina Yusuf')

    def test_update_phone_owned_by_another_donor(self):
        other = DonorService.register(**donor_fields(email='b@example.com', phone='+15550000002'))
        with self.assertRaises(Conflict):
            DonorService.update(self.donor.id, phone=other.phone)
        self.assertEqual(DonorService.get(self.donor.id).phone, '+15550000001')

    def test_update_keeping_own_phone(self):
        donor = DonorService.update(self.donor.id, phone='+15550000001', is_eligible=False)
        self.assertFalse(donor.is_eligible)

    def test_update_missing_donor(self):
        with self.assertRaises(NotFound):
            DonorService.update(9999, name='Nobody')

    def test_record_donation(self):
        donor = DonorService.record_donation(self.donor.id, days_ago(1))
        self.assertEqual(donor.last_donation_date, days_ago(1))
        self.assertFalse(donor.can_donate)

    def test_record_future_donation(self):
        with self.assertRaises(ValidationFailed):
            DonorService.record_donation(self.donor.id, timezone.localdate() + timedelta(days=1))

    def test_get_by_email(self):
        self.assertEqual(DonorService.get_by_email('AMINA@example.com').id, self.donor.id)
        with self.assertRaises(NotFound):
            DonorService.get_by_email('missing@example.com')

    def test_delete(self):
        DonorService.delete(self.donor.id)
        with self.assertRaises(NotFound):
            DonorService.delete(self.donor.id)


class DonorQueryTests(TestCase):
    def setUp(self):
        self.fresh = DonorService.register(**donor_fields(
            name='Fresh Donor', email='fresh@example.com', phone='+15550000011', blood_group='A+'))
        self.rested = DonorService.register(**donor_fields(
            name='Rested Donor', email='rested@example.com', phone='+15550000012', blood_group='A+',
            last_donation_date=days_ago(90)))
        self.recent = DonorService.register(**donor_fields(
            name='Recent Donor', email='recent@example.com', phone='+15550000013', blood_group='B-',
            last_donation_date=days_ago(10)))
        self.flagged = DonorService.register(**donor_fields(
            name='Flagged donor', email='flagged@example.com', phone='+15550000014', blood_group='A+'))
        DonorService.update(self.flagged.id, is_eligible=False)

    def test_eligible_ignores_donation_interval(self):
        names = {donor.name for donor in DonorService.eligible()}
        self.assertEqual(names, {'Fresh Donor', 'Rested Donor', 'Recent Donor'})

    def test_available_applies_flag_and_interval(self):
        names = {donor.name for donor in DonorService.available()}
        self.assertEqual(names, {'Fresh Donor', 'Rested Donor'})
        self.assertEqual(DonorService.available(blood_group='B-'), [])

    def test_by_blood_group(self):
        self.assertEqual(len(DonorService.list_all(blood_group='A+')), 3)

    def test_search_by_name_is_case_insensitive(self):
        names = {donor.name for donor in DonorService.search_by_name('DONOR')}
        self.assertEqual(len(names), 4)
        self.assertEqual([d.name for d in DonorService.search_by_name('rest')], ['Rested Donor'])

    def test_recent_donors(self):
        self.assertEqual([donor.name for donor in DonorService.recent()], ['Recent Donor'])
        self.assertEqual(DonorService.recent_count(), 1)

    def test_statistics_per_blood_group(self):
        stats = {row['blood_group']: row for row in DonorService.statistics()}
        self.assertEqual(stats['A+'], {
            'blood_group': 'A+',
            'total_donors': 3,
            'eligible_donors': 2,
            'available_donors': 2,
        })
        self.assertEqual(stats['B-']['available_donors'], 0)
        self.assertEqual(stats['B-']['eligible_donors'], 1)
        self.assertIsInstance(stats['A+']['total_donors'], int)

    def test_statistics_empty(self):
        Donor.objects.all().delete()
        self.assertEqual(DonorService.statistics(), [])


class DonorApiTests(APITestCase):
    def test_register_donor(self):
        response = self.client.post(reverse('donor-list'), donor_fields(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['data']['can_donate'])

    def test_register_validation(self):
        response = self.client.post(reverse('donor-list'), donor_fields(age=17, weight=45, phone='12'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.data['errors']), {'age', 'weight', 'phone'})
        self.assertEqual(Donor.objects.count(), 0)

    def test_register_duplicate_email(self):
        DonorService.register(**donor_fields())
        response = self.client.post(reverse('donor-list'), donor_fields(phone='+15550000099'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('already exists', response.data['message'])

    def test_update_phone_conflict(self):
        donor = DonorService.register(**donor_fields())
        DonorService.register(**donor_fields(email='x@example.com', phone='+15550000002'))
        url = reverse('donor-detail', kwargs={'pk': donor.id})
        response = self.client.put(url, {'phone': '+15550000002'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Phone number is already in use')

    def test_missing_donor(self):
        response = self.client.get(reverse('donor-detail', kwargs={'pk': 42}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_donation_date(self):
        donor = DonorService.register(**donor_fields())
        url = reverse('donor-donation-date', kwargs={'pk': donor.id})
        response = self.client.put(url, {'donation_date': days_ago(3).isoformat()}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['data']['can_donate'])

    def test_search_requires_name(self):
        response = self.client.get(reverse('donor-search'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_can_donate_filtered_by_blood_group(self):
        DonorService.register(**donor_fields())
        DonorService.register(**donor_fields(email='b@example.com', phone='+15550000002', blood_group='B+'))
        response = self.client.get(reverse('donor-can-donate'), {'blood_group': 'B+'})
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['blood_group'], 'B+')

    def test_lookup_by_email_after_case_variant_registration(self):
        DonorService.register(**donor_fields(email='Jane@Example.com'))
        response = self.client.post(
            reverse('donor-list'), donor_fields(email='jane@example.com', phone='+15550000002'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(reverse('donor-by-email', kwargs={'email': 'jane@example.com'}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['email'], 'Jane@Example.com')
