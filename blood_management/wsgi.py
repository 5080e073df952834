"""
WSGI config for the blood_management project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application
from dotenv import load_dotenv

load_dotenv(override=False)

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'blood_management.settings')

application = get_wsgi_application()
