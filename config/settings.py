"""
Django settings for the Form 5 Readiness project.
Production settings should override via environment variables.
"""

from pathlib import Path
import os

# Load environment variables from .env file (for local development)
from dotenv import load_dotenv
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    'DJANGO_SECRET_KEY',
    'django-insecure-change-this-in-production-very-long-secret-key-here'
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.environ.get('DJANGO_DEBUG', 'True').lower() == 'true'

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')


# Application definition

INSTALLED_APPS = [
    # Local apps
    'readiness.apps.ReadinessConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'config.urls'


# Database
# The readiness engine does not persist anything; SQLite keeps the test runner happy.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}


# Internationalization

LANGUAGE_CODE = 'en-za'

TIME_ZONE = 'Africa/Johannesburg'

USE_I18N = True

USE_TZ = True


DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# =====================================================
# Logging
# =====================================================
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'readiness': {
            'handlers': ['console'],
            'level': os.environ.get('READINESS_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}


# =====================================================
# Form 5 Readiness Settings
# =====================================================

# Minimum learning material coverage (%) per Form 5 Section 9
READINESS_MIN_LEARNING_MATERIAL_COVERAGE = int(
    os.environ.get('READINESS_MIN_LEARNING_MATERIAL_COVERAGE', '50')
)

# Below this overall completion (%) a submission gets an advisory warning
READINESS_ADVISORY_COMPLETION = int(os.environ.get('READINESS_ADVISORY_COMPLETION', '80'))

# Dotted path to a callable(record, section_name) -> int scoring sections 3.5 and 5.
# Empty: those sections score 0.
READINESS_DOCUMENT_SCORER = os.environ.get('READINESS_DOCUMENT_SCORER', '')
