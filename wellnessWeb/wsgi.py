"""
WSGI config for wellnessWeb project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'wellnessWeb.settings')

application = get_wsgi_application()
