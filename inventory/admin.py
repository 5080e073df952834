from django.contrib import admin
from .models import BloodInventory


@admin.register(BloodInventory)
class BloodInventoryAdmin(admin.ModelAdmin):
    list_display = ('blood_group', 'units_available', 'minimum_stock', 'maximum_capacity', 'updated_at')
    list_filter = ('blood_group',)
    search_fields = ('blood_group', 'notes')
    readonly_fields = ('created_at', 'updated_at')
