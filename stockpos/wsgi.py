"""
WSGI config for the stockpos project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'stockpos.settings')

application = get_wsgi_application()
