import logging
from datetime import datetime, time, timedelta

from django.db import transaction
from django.db.models import Case, IntegerField, Q, Value, When
from django.utils import timezone

from core.conf import get_setting
from core.exceptions import (
    AlreadyProcessed,
    FulfillmentFailed,
    InsufficientStock,
    NotFound,
    ValidationFailed,
)
from core.frames import frame_from_queryset, per_blood_group
from core.utils import clean_or_fail
from inventory.services import InventoryService
from .models import URGENCY_PRIORITY, BloodRequest, RequestStatus, UrgencyLevel

logger = logging.getLogger(__name__)


class BloodRequestService:
    """Blood request workflow; fulfilment debits the inventory ledger"""

    @classmethod
    def create(cls, **fields):
        logger.info(
            "Creating new blood request for blood group: %s by %s",
            fields.get('blood_group'), fields.get('requester_name')
        )
        fields['status'] = RequestStatus.PENDING
        blood_request = BloodRequest(**fields)
        clean_or_fail(blood_request)
        blood_request.save()
        logger.info("Created blood request with ID: %s", blood_request.id)
        return blood_request

    @classmethod
    def get(cls, request_id):
        try:
            return BloodRequest.objects.get(pk=request_id)
        except BloodRequest.DoesNotExist:
            raise NotFound(f"Blood request not found with ID: {request_id}")

    @classmethod
    def update_status(cls, request_id, new_status, admin_notes='', processed_by=''):
        """Approve, reject, cancel or fulfil a pending request without moving inventory"""
        logger.info("Updating blood request status for ID: %s to %s", request_id, new_status)
        if new_status not in RequestStatus.values or new_status == RequestStatus.PENDING:
            raise ValidationFailed(
                f"Invalid target status: {new_status}",
                errors={'status': ['Status must be one of APPROVED, REJECTED, FULFILLED, CANCELLED.']}
            )

        with transaction.atomic():
            blood_request = cls._lock_pending(request_id)

            if new_status == RequestStatus.APPROVED and not InventoryService.has_sufficient_units(
                    blood_request.blood_group, blood_request.units_requested):
                raise InsufficientStock(
                    f"Insufficient blood units available for blood group: {blood_request.blood_group}"
                )

            blood_request.mark_as_processed(processed_by, new_status, admin_notes)

        logger.info("Updated blood request status for ID: %s", request_id)
        return blood_request

    @classmethod
    def approve_and_fulfill(cls, request_id, admin_notes='', processed_by=''):
        """Debit the inventory and mark the request fulfilled as one unit of work"""
        logger.info("Approving and fulfilling blood request with ID: %s", request_id)

        with transaction.atomic():
            blood_request = cls._lock_pending(request_id)

            if not InventoryService.has_sufficient_units(blood_request.blood_group, blood_request.units_requested):
                raise InsufficientStock(
                    f"Insufficient blood units available for blood group: {blood_request.blood_group}"
                )

            try:
                InventoryService.debit(
                    blood_request.blood_group,
                    blood_request.units_requested,
                    notes=f"Units deducted for approved request ID: {request_id}"
                )
            except (InsufficientStock, NotFound) as exc:
                logger.error("Failed to deduct units from inventory: %s", exc.message)
                raise FulfillmentFailed(f"Failed to fulfill request: {exc.message}") from exc

            blood_request.mark_as_processed(processed_by, RequestStatus.FULFILLED, admin_notes)

        logger.info("Approved and fulfilled blood request with ID: %s", request_id)
        return blood_request

    @classmethod
    def cancel(cls, request_id, reason=''):
        logger.info("Cancelling blood request with ID: %s", request_id)

        with transaction.atomic():
            blood_request = cls._lock_pending(request_id)
            blood_request.mark_as_processed(get_setting('SYSTEM_PROCESSOR'), RequestStatus.CANCELLED, reason)

        logger.info("Cancelled blood request with ID: %s", request_id)
        return blood_request

    @classmethod
    def delete(cls, request_id):
        logger.info("Deleting blood request with ID: %s", request_id)
        deleted, _ = BloodRequest.objects.filter(pk=request_id).delete()
        if not deleted:
            raise NotFound(f"Blood request not found with ID: {request_id}")

    @classmethod
    def list_all(cls, status=None, blood_group=None, email=None, search=None):
        queryset = BloodRequest.objects.all()
        if status:
            queryset = queryset.filter(status=status)
        if blood_group:
            queryset = queryset.filter(blood_group=blood_group)
        if email:
            queryset = queryset.filter(contact_email__iexact=email)
        if search:
            queryset = queryset.filter(cls._search_q(search))
        return list(queryset)

    @classmethod
    def by_status(cls, status):
        return cls.list_all(status=status)

    @classmethod
    def by_blood_group(cls, blood_group):
        return cls.list_all(blood_group=blood_group)

    @classmethod
    def by_email(cls, email):
        return cls.list_all(email=email)

    @classmethod
    def pending(cls):
        return list(BloodRequest.objects.filter(status=RequestStatus.PENDING).order_by('created_at'))

    @classmethod
    def emergency_pending(cls):
        return list(BloodRequest.objects.filter(
            status=RequestStatus.PENDING,
            urgency_level=UrgencyLevel.EMERGENCY
        ).order_by('created_at'))

    @classmethod
    def recent(cls):
        since = timezone.now() - timedelta(days=get_setting('RECENT_REQUEST_DAYS'))
        return list(BloodRequest.objects.filter(created_at__gte=since).order_by('-created_at'))

    @classmethod
    def overdue_pending(cls):
        """Pending requests older than the overdue window, most urgent and oldest first"""
        return list(cls._overdue_queryset().annotate(
            urgency_rank=Case(
                *[When(urgency_level=level, then=Value(rank)) for rank, level in enumerate(URGENCY_PRIORITY)],
                default=Value(len(URGENCY_PRIORITY)),
                output_field=IntegerField(),
            )
        ).order_by('urgency_rank', 'created_at'))

    @classmethod
    def search(cls, text):
        logger.info("Searching blood requests by hospital or patient name: %s", text)
        return list(BloodRequest.objects.filter(cls._search_q(text)))

    @classmethod
    def pending_count(cls):
        return BloodRequest.objects.filter(status=RequestStatus.PENDING).count()

    @classmethod
    def emergency_pending_count(cls):
        return BloodRequest.objects.filter(
            status=RequestStatus.PENDING,
            urgency_level=UrgencyLevel.EMERGENCY
        ).count()

    @classmethod
    def overdue_pending_count(cls):
        return cls._overdue_queryset().count()

    @classmethod
    def created_today_count(cls):
        """Requests created between local midnight today and local midnight tomorrow"""
        start = timezone.make_aware(datetime.combine(timezone.localdate(), time.min))
        return BloodRequest.objects.filter(
            created_at__gte=start,
            created_at__lt=start + timedelta(days=1)
        ).count()

    @classmethod
    def statistics(cls):
        logger.info("Fetching request statistics")
        counts = {status: BloodRequest.objects.filter(status=status).count() for status in RequestStatus.values}
        return {
            'total_requests': BloodRequest.objects.count(),
            'pending_requests': counts[RequestStatus.PENDING],
            'approved_requests': counts[RequestStatus.APPROVED],
            'rejected_requests': counts[RequestStatus.REJECTED],
            'emergency_requests': cls.emergency_pending_count(),
            'urgent_requests': BloodRequest.objects.filter(
                status=RequestStatus.PENDING,
                urgency_level=UrgencyLevel.URGENT
            ).count(),
        }

    @classmethod
    def blood_group_statistics(cls):
        """Per blood group request counts and unit sums, overall and still pending"""
        logger.info("Fetching blood group request statistics")
        df = frame_from_queryset(BloodRequest.objects.all(), ('blood_group', 'units_requested', 'status'))

        def reduce(group):
            pending = group[group['status'] == RequestStatus.PENDING]
            return {
                'total_requests': len(group),
                'total_units_requested': group['units_requested'].sum(),
                'pending_requests': len(pending),
                'pending_units': pending['units_requested'].sum(),
            }

        return per_blood_group(df, reduce)

    @classmethod
    def _lock_pending(cls, request_id):
        blood_request = BloodRequest.objects.select_for_update().filter(pk=request_id).first()
        if blood_request is None:
            raise NotFound(f"Blood request not found with ID: {request_id}")
        if not blood_request.is_pending:
            raise AlreadyProcessed("Blood request has already been processed")
        return blood_request

    @staticmethod
    def _overdue_queryset():
        cutoff = timezone.now() - timedelta(hours=get_setting('OVERDUE_REQUEST_HOURS'))
        return BloodRequest.objects.filter(status=RequestStatus.PENDING, created_at__lt=cutoff)

    @staticmethod
    def _search_q(text):
        return Q(hospital_name__icontains=text) | Q(patient_name__icontains=text)
