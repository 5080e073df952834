import logging

from django.db import transaction
from django.db.models import F, Sum

from core.conf import get_setting
from core.constants import BLOOD_GROUPS
from core.exceptions import (
    CapacityExceeded,
    DuplicateKey,
    InsufficientStock,
    NotFound,
    ValidationFailed,
)
from .models import BloodInventory, StockStatus, classify_stock

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('units_available', 'minimum_stock', 'maximum_capacity', 'expiry_date', 'notes')
# Passing None explicitly clears these
NULLABLE_FIELDS = ('expiry_date',)


class InventoryService:
    """Owns the per blood group inventory ledger"""

    @classmethod
    def create(cls, blood_group, units_available=0, minimum_stock=None, maximum_capacity=None,
               expiry_date=None, notes=''):
        logger.info("Creating blood inventory for blood group: %s", blood_group)
        cls._validate_blood_group(blood_group)

        if minimum_stock is None:
            minimum_stock = get_setting('DEFAULT_MINIMUM_STOCK')
        if maximum_capacity is None:
            maximum_capacity = get_setting('DEFAULT_MAXIMUM_CAPACITY')
        cls._validate_levels(units_available, minimum_stock, maximum_capacity)

        with transaction.atomic():
            if BloodInventory.objects.filter(blood_group=blood_group).exists():
                raise DuplicateKey(f"Blood inventory for blood group {blood_group} already exists")

            inventory = BloodInventory.objects.create(
                blood_group=blood_group,
                units_available=units_available,
                minimum_stock=minimum_stock,
                maximum_capacity=maximum_capacity,
                expiry_date=expiry_date,
                notes=notes or '',
            )

        logger.info("Created blood inventory with ID: %s", inventory.id)
        return inventory

    @classmethod
    def get(cls, inventory_id):
        try:
            return BloodInventory.objects.get(pk=inventory_id)
        except BloodInventory.DoesNotExist:
            raise NotFound(f"Blood inventory not found with ID: {inventory_id}")

    @classmethod
    def get_by_blood_group(cls, blood_group):
        try:
            return BloodInventory.objects.get(blood_group=blood_group)
        except BloodInventory.DoesNotExist:
            raise NotFound(f"Blood inventory not found for blood group: {blood_group}")

    @classmethod
    def list_all(cls):
        return list(BloodInventory.objects.all())

    @classmethod
    def update(cls, inventory_id, **fields):
        """Apply only the supplied fields, keeping units within capacity"""
        logger.info("Updating blood inventory with ID: %s", inventory_id)

        with transaction.atomic():
            inventory = cls._locked(BloodInventory.objects.filter(pk=inventory_id))
            if inventory is None:
                raise NotFound(f"Blood inventory not found with ID: {inventory_id}")

            for name in UPDATABLE_FIELDS:
                if fields.get(name) is not None or (name in NULLABLE_FIELDS and name in fields):
                    setattr(inventory, name, fields[name])

            cls._validate_levels(inventory.units_available, inventory.minimum_stock, inventory.maximum_capacity)
            inventory.save()

        logger.info("Updated blood inventory with ID: %s", inventory_id)
        return inventory

    @classmethod
    def credit(cls, blood_group, units, notes=None):
        """Add units to a blood group, rejecting anything above maximum capacity"""
        logger.info("Adding %s units to blood group: %s", units, blood_group)
        cls._validate_units(units)

        with transaction.atomic():
            inventory = cls._locked_by_blood_group(blood_group)
            new_units = inventory.units_available + units
            if new_units > inventory.maximum_capacity:
                raise CapacityExceeded(
                    f"Adding units would exceed maximum capacity of {inventory.maximum_capacity}"
                )

            inventory.units_available = F('units_available') + units
            if notes is not None:
                inventory.notes = notes
            inventory.save()
            inventory.refresh_from_db()

        logger.info("Added %s units to blood group: %s", units, blood_group)
        return inventory

    @classmethod
    def debit(cls, blood_group, units, notes=None):
        """Remove units from a blood group, rejecting anything below zero"""
        logger.info("Removing %s units from blood group: %s", units, blood_group)
        cls._validate_units(units)

        with transaction.atomic():
            inventory = cls._locked_by_blood_group(blood_group)
            if inventory.units_available < units:
                raise InsufficientStock(
                    f"Insufficient units available. Current: {inventory.units_available}, Requested: {units}"
                )

            inventory.units_available = F('units_available') - units
            if notes is not None:
                inventory.notes = notes
            inventory.save()
            inventory.refresh_from_db()

        logger.info("Removed %s units from blood group: %s", units, blood_group)
        return inventory

    @classmethod
    def delete(cls, inventory_id):
        logger.info("Deleting blood inventory with ID: %s", inventory_id)
        deleted, _ = BloodInventory.objects.filter(pk=inventory_id).delete()
        if not deleted:
            raise NotFound(f"Blood inventory not found with ID: {inventory_id}")
        logger.info("Deleted blood inventory with ID: %s", inventory_id)

    @classmethod
    def has_sufficient_units(cls, blood_group, required_units):
        logger.info("Checking if %s units are available for blood group: %s", required_units, blood_group)
        return BloodInventory.objects.filter(
            blood_group=blood_group,
            units_available__gte=required_units
        ).exists()

    @staticmethod
    def stock_status(inventory):
        return classify_stock(inventory.units_available, inventory.minimum_stock)

    @classmethod
    def initialize_all_groups(cls):
        """Create an empty record for every blood group that has none yet"""
        logger.info("Initializing blood inventory for all blood groups")
        created = []

        with transaction.atomic():
            for blood_group in BLOOD_GROUPS:
                _, was_created = BloodInventory.objects.get_or_create(
                    blood_group=blood_group,
                    defaults={
                        'units_available': 0,
                        'minimum_stock': get_setting('DEFAULT_MINIMUM_STOCK'),
                        'maximum_capacity': get_setting('DEFAULT_MAXIMUM_CAPACITY'),
                        'notes': 'Initialized automatically',
                    }
                )
                if was_created:
                    logger.info("Initialized blood inventory for blood group: %s", blood_group)
                    created.append(blood_group)

        return created

    @classmethod
    def total_units(cls):
        return BloodInventory.objects.aggregate(total=Sum('units_available'))['total'] or 0

    @classmethod
    def by_stock_status(cls, status):
        if status not in StockStatus.values:
            raise ValidationFailed(f"Invalid stock status: {status}")
        return [inv for inv in BloodInventory.objects.all() if cls.stock_status(inv) == status]

    @classmethod
    def critical_shortages(cls):
        logger.info("Fetching critical shortages")
        return list(BloodInventory.objects.filter(units_available__lte=F('minimum_stock')))

    @classmethod
    def low_stock(cls):
        return cls.by_stock_status(StockStatus.LOW)

    @classmethod
    def out_of_stock(cls):
        return cls.by_stock_status(StockStatus.OUT_OF_STOCK)

    @classmethod
    def adequate_stock(cls):
        return cls.by_stock_status(StockStatus.ADEQUATE)

    @classmethod
    def availability(cls):
        return [
            {
                'blood_group': inv.blood_group,
                'units_available': inv.units_available,
                'status': cls.stock_status(inv),
                'available': inv.units_available > 0,
            }
            for inv in BloodInventory.objects.all()
        ]

    @classmethod
    def statistics(cls):
        logger.info("Fetching inventory statistics")
        inventories = list(BloodInventory.objects.all())
        statuses = [cls.stock_status(inv) for inv in inventories]

        return {
            'total_blood_groups': len(inventories),
            'total_units_available': sum(inv.units_available for inv in inventories),
            'critical_shortage_count': sum(1 for inv in inventories if inv.is_critical_shortage),
            'out_of_stock_count': statuses.count(StockStatus.OUT_OF_STOCK),
            'low_stock_count': statuses.count(StockStatus.LOW),
            'adequate_stock_count': statuses.count(StockStatus.ADEQUATE),
        }

    @classmethod
    def _locked(cls, queryset):
        return queryset.select_for_update().first()

    @classmethod
    def _locked_by_blood_group(cls, blood_group):
        inventory = cls._locked(BloodInventory.objects.filter(blood_group=blood_group))
        if inventory is None:
            raise NotFound(f"Blood inventory not found for blood group: {blood_group}")
        return inventory

    @staticmethod
    def _validate_blood_group(blood_group):
        if blood_group not in BLOOD_GROUPS:
            raise ValidationFailed(
                f"Invalid blood group: {blood_group}",
                errors={'blood_group': [f'"{blood_group}" is not a valid choice.']}
            )

    @staticmethod
    def _validate_units(units):
        if units is None or units <= 0:
            raise ValidationFailed(
                "Units must be at least 1",
                errors={'units': ['Ensure this value is greater than or equal to 1.']}
            )

    @staticmethod
    def _validate_levels(units_available, minimum_stock, maximum_capacity):
        if units_available < 0 or minimum_stock < 0 or maximum_capacity < 0:
            raise ValidationFailed("Inventory levels cannot be negative")
        if units_available > maximum_capacity:
            raise ValidationFailed(
                f"Units available ({units_available}) cannot exceed maximum capacity ({maximum_capacity})"
            )
