from .base import *

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = get_secret('SECRET_KEY', 'django-insecure-local-stockpos-key-change-me')

DEBUG = True

SIMPLE_JWT['SIGNING_KEY'] = SECRET_KEY
