from django.utils import timezone
from rest_framework import serializers

from core.constants import BLOOD_GROUP_CHOICES
from .models import Donor, phone_validator


def validate_not_future(value):
    if value is not None and value > timezone.localdate():
        raise serializers.ValidationError("Last donation date cannot be in the future")
    return value


class DonorSerializer(serializers.ModelSerializer):
    can_donate = serializers.BooleanField(read_only=True)

    class Meta:
        model = Donor
        fields = ['id', 'name', 'email', 'phone', 'blood_group', 'last_donation_date', 'age',
                  'weight', 'address', 'is_eligible', 'can_donate', 'created_at', 'updated_at']
        read_only_fields = fields


class DonorSummarySerializer(serializers.ModelSerializer):
    can_donate = serializers.BooleanField(read_only=True)

    class Meta:
        model = Donor
        fields = ['id', 'name', 'email', 'phone', 'blood_group', 'last_donation_date',
                  'is_eligible', 'can_donate']
        read_only_fields = fields


class DonorCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField(max_length=150)
    phone = serializers.CharField(max_length=15, validators=[phone_validator])
    blood_group = serializers.ChoiceField(choices=BLOOD_GROUP_CHOICES)
    last_donation_date = serializers.DateField(required=False, allow_null=True, validators=[validate_not_future])
    age = serializers.IntegerField(min_value=18, max_value=65)
    weight = serializers.FloatField(min_value=50.0)
    address = serializers.CharField(max_length=255)


class DonorUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100, required=False)
    phone = serializers.CharField(max_length=15, validators=[phone_validator], required=False)
    last_donation_date = serializers.DateField(required=False, validators=[validate_not_future])
    age = serializers.IntegerField(min_value=18, max_value=65, required=False)
    weight = serializers.FloatField(min_value=50.0, required=False)
    address = serializers.CharField(max_length=255, required=False)
    is_eligible = serializers.BooleanField(required=False)


class DonationDateSerializer(serializers.Serializer):
    donation_date = serializers.DateField(validators=[validate_not_future])


class DonorStatsSerializer(serializers.Serializer):
    blood_group = serializers.CharField()
    total_donors = serializers.IntegerField()
    eligible_donors = serializers.IntegerField()
    available_donors = serializers.IntegerField()
