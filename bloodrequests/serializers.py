from rest_framework import serializers

from core.constants import BLOOD_GROUP_CHOICES, PHONE_REGEX
from .models import BloodRequest, RequestStatus, UrgencyLevel


class BloodRequestSerializer(serializers.ModelSerializer):
    urgency_level_display = serializers.CharField(source='get_urgency_level_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = BloodRequest
        fields = ['id', 'requester_name', 'contact_email', 'contact_phone', 'blood_group',
                  'units_requested', 'urgency_level', 'urgency_level_display', 'hospital_name',
                  'patient_name', 'medical_reason', 'status', 'status_display', 'admin_notes',
                  'processed_by', 'processed_at', 'created_at', 'updated_at']
        read_only_fields = fields


class BloodRequestSummarySerializer(serializers.ModelSerializer):
    urgency_level_display = serializers.CharField(source='get_urgency_level_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = BloodRequest
        fields = ['id', 'requester_name', 'blood_group', 'units_requested', 'urgency_level',
                  'urgency_level_display', 'hospital_name', 'patient_name', 'status',
                  'status_display', 'created_at']
        read_only_fields = fields


class BloodRequestCreateSerializer(serializers.Serializer):
    requester_name = serializers.CharField(min_length=2, max_length=100)
    contact_email = serializers.EmailField(max_length=150)
    contact_phone = serializers.RegexField(PHONE_REGEX, max_length=15,
                                           error_messages={'invalid': "Invalid phone number format"})
    blood_group = serializers.ChoiceField(choices=BLOOD_GROUP_CHOICES)
    units_requested = serializers.IntegerField(min_value=1, max_value=10)
    urgency_level = serializers.ChoiceField(choices=UrgencyLevel.choices)
    hospital_name = serializers.CharField(max_length=150)
    patient_name = serializers.CharField(max_length=100)
    medical_reason = serializers.CharField(max_length=500, required=False, allow_blank=True)


class BloodRequestStatusSerializer(serializers.Serializer):
    """Admin decision on a pending request"""
    status = serializers.ChoiceField(choices=RequestStatus.choices)
    admin_notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    processed_by = serializers.CharField(max_length=100)

    def validate_status(self, value):
        if value == RequestStatus.PENDING:
            raise serializers.ValidationError("Status must be APPROVED, REJECTED, FULFILLED or CANCELLED")
        return value


class FulfillSerializer(serializers.Serializer):
    admin_notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    processed_by = serializers.CharField(max_length=100)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)


class RequestStatsSerializer(serializers.Serializer):
    total_requests = serializers.IntegerField()
    pending_requests = serializers.IntegerField()
    approved_requests = serializers.IntegerField()
    rejected_requests = serializers.IntegerField()
    emergency_requests = serializers.IntegerField()
    urgent_requests = serializers.IntegerField()


class BloodGroupRequestStatsSerializer(serializers.Serializer):
    blood_group = serializers.CharField()
    total_requests = serializers.IntegerField()
    total_units_requested = serializers.IntegerField()
    pending_requests = serializers.IntegerField()
    pending_units = serializers.IntegerField()
