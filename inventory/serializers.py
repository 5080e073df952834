from rest_framework import serializers

from core.conf import get_setting
from core.constants import BLOOD_GROUP_CHOICES
from .models import BloodInventory, StockStatus


class BloodInventorySerializer(serializers.ModelSerializer):
    stock_status = serializers.CharField(read_only=True)
    is_critical_shortage = serializers.BooleanField(read_only=True)
    is_at_max_capacity = serializers.BooleanField(read_only=True)

    class Meta:
        model = BloodInventory
        fields = ['id', 'blood_group', 'units_available', 'minimum_stock', 'maximum_capacity',
                  'expiry_date', 'notes', 'stock_status', 'is_critical_shortage',
                  'is_at_max_capacity', 'created_at', 'updated_at']
        read_only_fields = fields


class BloodInventorySummarySerializer(serializers.ModelSerializer):
    stock_status = serializers.CharField(read_only=True)
    is_critical_shortage = serializers.BooleanField(read_only=True)

    class Meta:
        model = BloodInventory
        fields = ['id', 'blood_group', 'units_available', 'stock_status', 'is_critical_shortage']
        read_only_fields = fields


class BloodInventoryCreateSerializer(serializers.Serializer):
    blood_group = serializers.ChoiceField(choices=BLOOD_GROUP_CHOICES)
    units_available = serializers.IntegerField(min_value=0)
    minimum_stock = serializers.IntegerField(min_value=0, required=False)
    maximum_capacity = serializers.IntegerField(min_value=0, required=False)
    expiry_date = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate(self, data):
        maximum_capacity = data.get('maximum_capacity', get_setting('DEFAULT_MAXIMUM_CAPACITY'))
        if data['units_available'] > maximum_capacity:
            raise serializers.ValidationError(
                {'units_available': f"Cannot exceed maximum capacity of {maximum_capacity}"}
            )
        return data


class BloodInventoryUpdateSerializer(serializers.Serializer):
    units_available = serializers.IntegerField(min_value=0, required=False)
    minimum_stock = serializers.IntegerField(min_value=0, required=False)
    maximum_capacity = serializers.IntegerField(min_value=0, required=False)
    expiry_date = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True)


class UnitsUpdateSerializer(serializers.Serializer):
    units = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_units(self, value):
        limit = get_setting('MAX_UNITS_PER_ADJUSTMENT')
        if value > limit:
            raise serializers.ValidationError(f"Cannot add/remove more than {limit} units at once")
        return value


class BloodGroupAvailabilitySerializer(serializers.Serializer):
    blood_group = serializers.CharField()
    units_available = serializers.IntegerField()
    status = serializers.ChoiceField(choices=StockStatus.choices)
    available = serializers.BooleanField()


class InventoryStatsSerializer(serializers.Serializer):
    total_blood_groups = serializers.IntegerField()
    total_units_available = serializers.IntegerField()
    critical_shortage_count = serializers.IntegerField()
    out_of_stock_count = serializers.IntegerField()
    low_stock_count = serializers.IntegerField()
    adequate_stock_count = serializers.IntegerField()
