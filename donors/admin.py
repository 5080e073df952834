from django.contrib import admin
from .models import Donor


@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'phone', 'blood_group', 'last_donation_date', 'is_eligible')
    list_filter = ('blood_group', 'is_eligible')
    search_fields = ('name', 'email', 'phone')
    readonly_fields = ('created_at', 'updated_at')
