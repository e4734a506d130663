"""
ASGI config for TaskCatalyst project.

Served by any ASGI server (Uvicorn, Daphne). Synchronous ninja views run in
Django's thread pool, so a slow catalyst generation call only blocks its own
request.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

from django.core.asgi import get_asgi_application

application = get_asgi_application()
