"""
WSGI config for the tailoring shop backend.

Run `python manage.py bootstrap` once before starting the server so the
schema and the default admin account exist before traffic arrives.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backend.config.settings')

application = get_wsgi_application()
