"""
ASGI config for the stockpos project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'stockpos.settings')

application = get_asgi_application()
