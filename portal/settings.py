"""
Django settings for the job portal front end.
"""

from pathlib import Path
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


# -------------------------
# Basic / environment
# -------------------------
SECRET_KEY = os.environ.get('PORTAL_SECRET_KEY', 'django-insecure-dev-secret-for-local')

DEBUG = _env_bool('PORTAL_DEBUG', 'True')

ALLOWED_HOSTS = (
    os.environ.get('PORTAL_ALLOWED_HOSTS', '')
    .split(',') if os.environ.get('PORTAL_ALLOWED_HOSTS') else ['localhost', '127.0.0.1', 'testserver']
)

APP_NAME = os.environ.get('PORTAL_APP_NAME', 'Job Application Portal')
APP_VERSION = os.environ.get('PORTAL_APP_VERSION', '1.0.0')
APP_ENVIRONMENT = os.environ.get('PORTAL_ENVIRONMENT', 'development')


# -------------------------
# Backend API
# -------------------------
API_BASE_URL = os.environ.get('API_BASE_URL', 'http://localhost:8080').rstrip('/')
# seconds
API_TIMEOUT = float(os.environ.get('API_TIMEOUT', 10))

# Serve bundled JSON data when the backend cannot be reached
ENABLE_MOCK_DATA = _env_bool('ENABLE_MOCK_DATA', 'True')
MOCK_DATA_PATH = os.environ.get('PORTAL_MOCK_DATA_PATH', os.path.join(BASE_DIR, 'jobs', 'data', 'job_roles.json'))


# -------------------------
# Installed apps / middleware
# -------------------------
INSTALLED_APPS = [
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # project apps
    'accounts',
    'jobs',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'portal.urls'

# /job-roles and /job-roles/ are both in use
APPEND_SLASH = False


# -------------------------
# Templates
# -------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [os.path.join(BASE_DIR, 'templates')],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.template.context_processors.static',
                'django.template.context_processors.csrf',
                'django.contrib.messages.context_processors.messages',
                'accounts.context_processors.auth_context',
            ],
        },
    },
]


WSGI_APPLICATION = 'portal.wsgi.application'


# -------------------------
# Database
# -------------------------
# All domain data lives behind the backend API.
DATABASES = {}


# -------------------------
# Sessions
# -------------------------
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
SESSION_COOKIE_AGE = int(os.environ.get('SESSION_TIMEOUT', 24 * 60 * 60))
SESSION_COOKIE_HTTPONLY = True
MESSAGE_STORAGE = 'django.contrib.messages.storage.cookie.CookieStorage'

LOGIN_URL = '/login'


# -------------------------
# Uploads
# -------------------------
CV_MAX_UPLOAD_SIZE = 5 * 1024 * 1024
CV_ALLOWED_MIME_TYPES = (
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
)
FILE_UPLOAD_MAX_MEMORY_SIZE = CV_MAX_UPLOAD_SIZE + 1024 * 1024
DATA_UPLOAD_MAX_MEMORY_SIZE = CV_MAX_UPLOAD_SIZE + 1024 * 1024


# -------------------------
# Internationalization
# -------------------------
LANGUAGE_CODE = 'en-gb'
TIME_ZONE = os.environ.get('PORTAL_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True


# -------------------------
# Static
# -------------------------
STATIC_URL = '/static/'
STATICFILES_DIRS = [os.path.join(BASE_DIR, 'static')]
STATIC_ROOT = os.environ.get('PORTAL_STATIC_ROOT', os.path.join(BASE_DIR, 'staticfiles'))


# -------------------------
# Email configuration
# -------------------------
NOTIFY_APPLICANTS = _env_bool('PORTAL_NOTIFY_APPLICANTS', 'False')

EMAIL_BACKEND = os.environ.get('PORTAL_EMAIL_BACKEND', 'django.core.mail.backends.console.EmailBackend')
DEFAULT_FROM_EMAIL = os.environ.get('PORTAL_DEFAULT_FROM_EMAIL', 'Job Portal <no-reply@jobportal.local>')

# Allow shorthand PORTAL_EMAIL_BACKEND='smtp' for convenience
if EMAIL_BACKEND.lower() in ('smtp', 'django.core.mail.backends.smtp.emailbackend'):
    EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
    EMAIL_HOST = os.environ.get('PORTAL_EMAIL_HOST', 'localhost')
    EMAIL_PORT = int(os.environ.get('PORTAL_EMAIL_PORT', 587))
    EMAIL_USE_TLS = _env_bool('PORTAL_EMAIL_USE_TLS', 'True')
    EMAIL_HOST_USER = os.environ.get('PORTAL_EMAIL_HOST_USER', '')
    EMAIL_HOST_PASSWORD = os.environ.get('PORTAL_EMAIL_HOST_PASSWORD', '')


# -------------------------
# Logging (basic)
# -------------------------
LOG_LEVEL = os.environ.get('PORTAL_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO' if DEBUG else 'WARNING',
            'propagate': False,
        },
    },
}


# -------------------------
# Security (production suggestions)
# -------------------------
# In production, set these via environment variables:
# SECURE_HSTS_SECONDS = 31536000
# SECURE_SSL_REDIRECT = True
# SESSION_COOKIE_SECURE = True
# CSRF_COOKIE_SECURE = True
