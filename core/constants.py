BLOOD_GROUP_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-'),
]

BLOOD_GROUPS = [value for value, _ in BLOOD_GROUP_CHOICES]

PHONE_REGEX = r'^[+]?[0-9]{10,15}$'


def blood_group_order(blood_group):
    """Sort key placing blood groups in canonical order"""
    try:
        return BLOOD_GROUPS.index(blood_group)
    except ValueError:
        return len(BLOOD_GROUPS)
