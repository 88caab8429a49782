"""
WSGI config for the Django application.

WSGI (Web Server Gateway Interface) is the standard Python web server
interface. An ASGI entry point is available in config.asgi; WSGI is
used by traditional deployments (gunicorn, uWSGI, mod_wsgi).

This file exposes the WSGI callable as a module-level variable named `application`.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
