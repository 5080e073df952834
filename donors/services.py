import logging
from datetime import timedelta

import pandas as pd
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from core.conf import get_setting
from core.exceptions import Conflict, DuplicateKey, NotFound, ValidationFailed
from core.frames import frame_from_queryset, per_blood_group
from core.utils import clean_or_fail
from .models import Donor, can_donate, donation_cutoff

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'phone', 'last_donation_date', 'age', 'weight', 'address', 'is_eligible')


class DonorService:
    """Donor registry operations"""

    @classmethod
    def register(cls, **fields):
        email = fields.get('email')
        phone = fields.get('phone')
        logger.info("Creating new donor with email: %s", email)

        fields['is_eligible'] = True
        donor = Donor(**fields)
        clean_or_fail(donor)

        with transaction.atomic():
            if Donor.objects.filter(email__iexact=email).exists():
                raise DuplicateKey(f"Donor with email {email} already exists")
            if Donor.objects.filter(phone=phone).exists():
                raise DuplicateKey(f"Donor with phone {phone} already exists")
            donor.save()

        logger.info("Created donor with ID: %s", donor.id)
        return donor

    @classmethod
    def get(cls, donor_id):
        try:
            return Donor.objects.get(pk=donor_id)
        except Donor.DoesNotExist:
            raise NotFound(f"Donor not found with ID: {donor_id}")

    @classmethod
    def get_by_email(cls, email):
        try:
            return Donor.objects.get(email__iexact=email)
        except Donor.DoesNotExist:
            raise NotFound(f"Donor not found with email: {email}")

    @classmethod
    def update(cls, donor_id, **fields):
        """Apply the supplied fields only; absent fields keep their values"""
        logger.info("Updating donor with ID: %s", donor_id)

        with transaction.atomic():
            donor = Donor.objects.select_for_update().filter(pk=donor_id).first()
            if donor is None:
                raise NotFound(f"Donor not found with ID: {donor_id}")

            phone = fields.get('phone')
            if phone is not None and Donor.objects.filter(phone=phone).exclude(pk=donor_id).exists():
                raise Conflict("Phone number is already in use")

            for name in UPDATABLE_FIELDS:
                if fields.get(name) is not None:
                    setattr(donor, name, fields[name])
            clean_or_fail(donor)
            donor.save()

        logger.info("Updated donor with ID: %s", donor_id)
        return donor

    @classmethod
    def record_donation(cls, donor_id, donation_date):
        logger.info("Updating last donation date for donor ID: %s", donor_id)
        if donation_date > timezone.localdate():
            raise ValidationFailed(
                "Last donation date cannot be in the future",
                errors={'donation_date': ['Last donation date cannot be in the future.']}
            )

        donor = cls.get(donor_id)
        donor.last_donation_date = donation_date
        donor.save(update_fields=['last_donation_date', 'updated_at'])
        return donor

    @classmethod
    def delete(cls, donor_id):
        logger.info("Deleting donor with ID: %s", donor_id)
        deleted, _ = Donor.objects.filter(pk=donor_id).delete()
        if not deleted:
            raise NotFound(f"Donor not found with ID: {donor_id}")

    @staticmethod
    def can_donate(donor):
        return can_donate(donor.is_eligible, donor.last_donation_date)

    @classmethod
    def list_all(cls, blood_group=None):
        queryset = Donor.objects.all()
        if blood_group:
            queryset = queryset.filter(blood_group=blood_group)
        return list(queryset)

    @classmethod
    def eligible(cls):
        """Donors whose eligibility flag is set, regardless of the donation interval"""
        return list(Donor.objects.filter(is_eligible=True))

    @classmethod
    def available(cls, blood_group=None):
        """Donors who can actually donate today"""
        queryset = Donor.objects.filter(cls._can_donate_q())
        if blood_group:
            queryset = queryset.filter(blood_group=blood_group)
        return list(queryset)

    @classmethod
    def search_by_name(cls, name):
        logger.info("Searching donors by name: %s", name)
        return list(Donor.objects.filter(name__icontains=name))

    @classmethod
    def recent(cls):
        """Donors who donated within the recent-donor window"""
        since = timezone.localdate() - timedelta(days=get_setting('RECENT_DONOR_DAYS'))
        return list(Donor.objects.filter(last_donation_date__gte=since).order_by('-last_donation_date'))

    @classmethod
    def count(cls):
        return Donor.objects.count()

    @classmethod
    def eligible_count(cls):
        return Donor.objects.filter(is_eligible=True).count()

    @classmethod
    def recent_count(cls):
        since = timezone.localdate() - timedelta(days=get_setting('RECENT_DONOR_DAYS'))
        return Donor.objects.filter(last_donation_date__gte=since).count()

    @classmethod
    def statistics(cls):
        """Per blood group totals of registered, flag-eligible and currently available donors"""
        logger.info("Fetching donor statistics")
        df = frame_from_queryset(Donor.objects.all(), ('blood_group', 'is_eligible', 'last_donation_date'))
        if not df.empty:
            last_donation = pd.to_datetime(df['last_donation_date'])
            cutoff = pd.Timestamp(donation_cutoff())
            df['can_donate'] = df['is_eligible'].astype(bool) & (last_donation.isna() | (last_donation < cutoff))

        return per_blood_group(df, lambda group: {
            'total_donors': len(group),
            'eligible_donors': group['is_eligible'].astype(bool).sum(),
            'available_donors': group['can_donate'].sum(),
        })

    @staticmethod
    def _can_donate_q():
        return Q(is_eligible=True) & (
            Q(last_donation_date__isnull=True) | Q(last_donation_date__lt=donation_cutoff())
        )
