from rest_framework import serializers


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for dashboard overview metrics."""
    total_donors = serializers.IntegerField()
    eligible_donors = serializers.IntegerField()
    total_blood_units = serializers.IntegerField()
    critical_shortages = serializers.IntegerField()
    pending_requests = serializers.IntegerField()
    emergency_requests = serializers.IntegerField()
    today_requests = serializers.IntegerField()
    today_donations = serializers.IntegerField()
