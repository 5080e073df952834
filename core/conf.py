from django.conf import settings

DEFAULTS = {
    'DONATION_INTERVAL_DAYS': 56,
    'RECENT_DONOR_DAYS': 30,
    'RECENT_REQUEST_DAYS': 7,
    'OVERDUE_REQUEST_HOURS': 24,
    'DEFAULT_MINIMUM_STOCK': 5,
    'DEFAULT_MAXIMUM_CAPACITY': 100,
    'MAX_UNITS_PER_ADJUSTMENT': 50,
    'OVERDUE_CRITICAL_THRESHOLD': 5,
    'SHORTAGE_WARNING_THRESHOLD': 3,
    'SYSTEM_PROCESSOR': 'System',
}


def get_setting(name):
    """Read a blood bank setting, falling back to the built-in default"""
    overrides = getattr(settings, 'BLOOD_BANK', {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
