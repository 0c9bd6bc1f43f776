"""
Django settings for the LandyCakes storefront.

Values come from the environment, optionally through a `.env` file at the
repository root.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / '.env')


def _get_env(*keys, default=None):
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != '':
            return v.strip()
    return default


def _get_int(*keys, default=None):
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_bool(*keys, default=False):
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return v.lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = _get_env('DJANGO_SECRET_KEY', default='landycakes-dev-only-secret')
DEBUG = _get_bool('DJANGO_DEBUG', default=False)
ALLOWED_HOSTS = (_get_env('DJANGO_ALLOWED_HOSTS', default='localhost,127.0.0.1,testserver') or '').split(',')

INSTALLED_APPS = [
    'rest_framework',
    'cart',
    'payments',
    'Marketplace',
]

MIDDLEWARE = [
    'django.middleware.common.CommonMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'cart.middleware.CartMiddleware',
]

ROOT_URLCONF = 'landycakes.urls'
WSGI_APPLICATION = 'landycakes.wsgi.application'

# The backend owns every record; the storefront only keeps per-browser state.
DATABASES = {}

SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = 60 * 60 * 24 * 30

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Africa/Nairobi'
USE_TZ = True

# Session key holding the bearer token issued by the backend's auth provider.
AUTH_TOKEN_SESSION_KEY = 'auth_token'

STOREFRONT_API = {
    'BASE_URL': _get_env('STOREFRONT_API_URL', default='http://localhost:3000/api'),
    'TIMEOUT': _get_int('STOREFRONT_API_TIMEOUT', default=15),
}

CHECKOUT = {
    'PHONE_PATTERN': _get_env('MPESA_PHONE_PATTERN', default=r'^07\d{8}$'),
    'PHONE_EXAMPLE': _get_env('MPESA_PHONE_EXAMPLE', default='07XXXXXXXX'),
    'POLL_INTERVAL': _get_int('PAYMENT_POLL_INTERVAL', default=3),
    'POLL_TIMEOUT': _get_int('PAYMENT_POLL_TIMEOUT', default=300),
    'REDIRECT_DELAY': _get_int('PAYMENT_REDIRECT_DELAY', default=3),
}

DELIVERY = {
    'FREE_ABOVE': _get_int('FREE_DELIVERY_THRESHOLD', default=5000),
    'FEE': _get_int('DELIVERY_FEE', default=500),
}

CATALOG_PAGE_SIZE = _get_int('CATALOG_PAGE_SIZE', default=12)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'default',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': _get_env('DJANGO_LOG_LEVEL', default='INFO'),
    },
}
