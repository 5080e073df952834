from datetime import timedelta

from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator, RegexValidator
from django.db import models
from django.utils import timezone

from core.conf import get_setting
from core.constants import BLOOD_GROUP_CHOICES, PHONE_REGEX

phone_validator = RegexValidator(PHONE_REGEX, "Invalid phone number format")


def donation_cutoff(today=None):
    """Donors whose last donation falls strictly before this date may donate again"""
    today = today or timezone.localdate()
    return today - timedelta(days=get_setting('DONATION_INTERVAL_DAYS'))


def can_donate(is_eligible, last_donation_date, today=None):
    if not is_eligible:
        return False
    if last_donation_date is None:
        return True
    return last_donation_date < donation_cutoff(today)


class Donor(models.Model):
    """A registered blood donor"""
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    email = models.EmailField(max_length=150, unique=True)
    phone = models.CharField(max_length=15, unique=True, validators=[phone_validator])
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    last_donation_date = models.DateField(null=True, blank=True)
    age = models.PositiveIntegerField(validators=[MinValueValidator(18), MaxValueValidator(65)])
    weight = models.FloatField(validators=[MinValueValidator(50.0)])
    address = models.CharField(max_length=255)
    is_eligible = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.blood_group})"

    @property
    def can_donate(self):
        """Eligible and last donated more than the donation interval ago"""
        return can_donate(self.is_eligible, self.last_donation_date)

    class Meta:
        ordering = ['id']
