from django.db import models
from django.core.validators import MinValueValidator
from core.constants import BLOOD_GROUP_CHOICES


class StockStatus(models.TextChoices):
    OUT_OF_STOCK = 'OUT_OF_STOCK', 'Out of Stock'
    CRITICAL = 'CRITICAL', 'Critical'
    LOW = 'LOW', 'Low'
    ADEQUATE = 'ADEQUATE', 'Adequate'


def classify_stock(units_available, minimum_stock):
    """Classify a stock level against its minimum stock threshold"""
    if units_available == 0:
        return StockStatus.OUT_OF_STOCK
    if units_available <= minimum_stock:
        return StockStatus.CRITICAL
    if units_available <= minimum_stock * 2:
        return StockStatus.LOW
    return StockStatus.ADEQUATE


class BloodInventory(models.Model):
    """Tracks available blood units for one blood group"""
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES, unique=True)
    units_available = models.PositiveIntegerField(default=0)
    minimum_stock = models.PositiveIntegerField(default=5, validators=[MinValueValidator(0)])
    maximum_capacity = models.PositiveIntegerField(default=100, validators=[MinValueValidator(0)])
    expiry_date = models.DateTimeField(null=True, blank=True)
    notes = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.blood_group}: {self.units_available} units"

    @property
    def stock_status(self):
        return classify_stock(self.units_available, self.minimum_stock)

    @property
    def is_critical_shortage(self):
        return self.units_available <= self.minimum_stock

    @property
    def is_at_max_capacity(self):
        return self.units_available >= self.maximum_capacity

    class Meta:
        verbose_name_plural = "Blood inventories"
        ordering = ['id']
