from django.contrib import admin
from .models import BloodRequest


@admin.register(BloodRequest)
class BloodRequestAdmin(admin.ModelAdmin):
    list_display = ('requester_name', 'blood_group', 'units_requested', 'hospital_name',
                    'urgency_level', 'status', 'created_at', 'processed_at')
    list_filter = ('status', 'blood_group', 'urgency_level', 'created_at')
    search_fields = ('patient_name', 'hospital_name', 'requester_name', 'contact_email')
    readonly_fields = ('created_at', 'updated_at', 'processed_at')
