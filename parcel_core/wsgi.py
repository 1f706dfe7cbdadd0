"""
WSGI config for the parcel platform.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'parcel_core.settings')

application = get_wsgi_application()
