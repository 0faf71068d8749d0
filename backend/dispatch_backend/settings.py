"""
Django settings for the dispatch backend.

Everything environment-specific comes from the process environment, optionally
loaded from a .env file.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv()

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dev-only-insecure-key')
DEBUG = os.getenv('DJANGO_DEBUG', 'false').lower() in ('1', 'true', 'yes')
ALLOWED_HOSTS = [host for host in os.getenv('DJANGO_ALLOWED_HOSTS', '*').split(',') if host]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'logistics',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'dispatch_backend.urls'
WSGI_APPLICATION = 'dispatch_backend.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('DATABASE_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'es-pe'
TIME_ZONE = 'America/Lima'
USE_TZ = True

# Authentication is handled in front of this service.
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.AllowAny'],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'DEFAULT_PARSER_CLASSES': ['rest_framework.parsers.JSONParser'],
}

# --- Dispatch / push gateway ---
DISPATCH_RADIUS_KM = float(os.getenv('DISPATCH_RADIUS_KM', '10'))
DISPATCH_MAX_WORKERS = int(os.getenv('DISPATCH_MAX_WORKERS', '4'))
DISPATCH_COURIER_PAGE_SIZE = int(os.getenv('DISPATCH_COURIER_PAGE_SIZE', '500'))
DISPATCH_DEDUPE_TTL_SECONDS = int(os.getenv('DISPATCH_DEDUPE_TTL_SECONDS', '600'))

PUSH_GATEWAY_URL = os.getenv('PUSH_GATEWAY_URL', 'https://exp.host/--/api/v2/push/send')
PUSH_GATEWAY_TIMEOUT = float(os.getenv('PUSH_GATEWAY_TIMEOUT', '10'))
PUSH_GATEWAY_ACCESS_TOKEN = os.getenv('PUSH_GATEWAY_ACCESS_TOKEN') or None
PUSH_GATEWAY_BATCH_SIZE = 100

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {'handlers': ['console'], 'level': LOG_LEVEL},
    'loggers': {
        'django': {'handlers': ['console'], 'level': 'WARNING', 'propagate': False},
    },
}
