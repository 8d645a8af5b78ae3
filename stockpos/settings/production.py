import os

from .base import *

# Fetch Secret Key from Enviroment
SECRET_KEY = os.environ['SECRET_KEY']

DEBUG = False

SIMPLE_JWT['SIGNING_KEY'] = SECRET_KEY

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': get_secret('DB_NAME', 'stockpos'),
        'USER': get_secret('DB_USER', 'stockpos'),
        'PASSWORD': get_secret('DB_PASSWORD', ''),
        'HOST': get_secret('DB_HOST', 'localhost'),
        'PORT': get_secret('DB_PORT', '5432'),
    }
}

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
