"""
WSGI config for the Coffee Chat reservation system.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'coffeechat.settings.production')

application = get_wsgi_application()
