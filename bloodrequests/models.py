from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator, RegexValidator
from django.db import models
from django.utils import timezone

from core.constants import BLOOD_GROUP_CHOICES, PHONE_REGEX
from core.exceptions import AlreadyProcessed


class RequestStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending Review'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'
    FULFILLED = 'FULFILLED', 'Fulfilled'
    CANCELLED = 'CANCELLED', 'Cancelled'


class UrgencyLevel(models.TextChoices):
    EMERGENCY = 'EMERGENCY', 'Emergency'
    URGENT = 'URGENT', 'Urgent'
    NORMAL = 'NORMAL', 'Normal'


# Highest priority first
URGENCY_PRIORITY = [UrgencyLevel.EMERGENCY, UrgencyLevel.URGENT, UrgencyLevel.NORMAL]


class BloodRequest(models.Model):
    """Blood request raised on behalf of a patient"""
    requester_name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    contact_email = models.EmailField(max_length=150)
    contact_phone = models.CharField(max_length=15, validators=[RegexValidator(PHONE_REGEX, "Invalid phone number format")])
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    units_requested = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(10)])
    urgency_level = models.CharField(max_length=10, choices=UrgencyLevel.choices, default=UrgencyLevel.NORMAL)
    hospital_name = models.CharField(max_length=150)
    patient_name = models.CharField(max_length=100)
    medical_reason = models.CharField(max_length=500, blank=True)
    status = models.CharField(max_length=10, choices=RequestStatus.choices, default=RequestStatus.PENDING)
    admin_notes = models.CharField(max_length=500, blank=True)
    processed_by = models.CharField(max_length=100, blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Request for {self.units_requested} units of {self.blood_group}"

    @property
    def is_pending(self):
        return self.status == RequestStatus.PENDING

    def mark_as_processed(self, processed_by, new_status, notes=''):
        """Move the request out of PENDING; the only place a transition happens"""
        if not self.is_pending:
            raise AlreadyProcessed("Blood request has already been processed")

        self.processed_by = processed_by or ''
        self.processed_at = timezone.now()
        self.status = new_status
        self.admin_notes = notes or ''
        self.save()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='bloodrequest_status_idx'),
            models.Index(fields=['blood_group', 'status'], name='bloodrequest_group_idx'),
        ]
