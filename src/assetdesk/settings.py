"""Django settings for AssetDesk project."""

import os
from pathlib import Path

from django.urls import reverse_lazy

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get(
    "SECRET_KEY", "dev-secret-key-change-in-production"
)

DEBUG = os.environ.get("DEBUG", "True").lower() in ("true", "1", "yes")

ALLOWED_HOSTS = [
    h.strip()
    for h in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
]
# Always allow localhost for internal health checks
for _h in ("localhost", "127.0.0.1"):
    if _h not in ALLOWED_HOSTS:
        ALLOWED_HOSTS.append(_h)

INSTALLED_APPS = [
    "unfold",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "assets",
    "employees",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_ratelimit.middleware.RatelimitMiddleware",
]

ROOT_URLCONF = "assetdesk.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "assetdesk.wsgi.application"
ASGI_APPLICATION = "assetdesk.asgi.application"

# Database configuration
DATABASE_URL = os.environ.get("DATABASE_URL", "")
if DATABASE_URL:
    import re

    match = re.match(
        r"postgres://(?P<user>[^:]+):(?P<password>[^@]+)@"
        r"(?P<host>[^:]+):(?P<port>\d+)/(?P<name>.+)",
        DATABASE_URL,
    )
    if match:
        DATABASES = {
            "default": {
                "ENGINE": "django.db.backends.postgresql",
                "NAME": match.group("name"),
                "USER": match.group("user"),
                "PASSWORD": match.group("password"),
                "HOST": match.group("host"),
                "PORT": match.group("port"),
            }
        }
    else:
        DATABASES = {
            "default": {
                "ENGINE": "django.db.backends.sqlite3",
                "NAME": BASE_DIR / "db.sqlite3",
            }
        }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation."
        "UserAttributeSimilarityValidator"
    },
    {
        "NAME": "django.contrib.auth.password_validation."
        "MinimumLengthValidator"
    },
    {
        "NAME": "django.contrib.auth.password_validation."
        "CommonPasswordValidator"
    },
    {
        "NAME": "django.contrib.auth.password_validation."
        "NumericPasswordValidator"
    },
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Custom rate limit view returns 429 with Retry-After header
RATELIMIT_VIEW = "assetdesk.views.ratelimited_view"

LOGIN_URL = reverse_lazy("admin:login")

# CSRF/session security for production
if not DEBUG:
    CSRF_COOKIE_SECURE = True
    SESSION_COOKIE_SECURE = True
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
    CSRF_TRUSTED_ORIGINS = [f"https://{h}" for h in ALLOWED_HOSTS]

SESSION_COOKIE_AGE = int(os.environ.get("SESSION_COOKIE_AGE", "1209600"))
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"

# Site configuration
SITE_NAME = os.environ.get("SITE_NAME", "AssetDesk")
SITE_SHORT_NAME = os.environ.get("SITE_SHORT_NAME", "AssetDesk")

# Cache configuration. Redis when CACHE_URL is set, otherwise per-process.
CACHE_URL = os.environ.get("CACHE_URL", "")
if CACHE_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": CACHE_URL,
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        }
    }
    SILENCED_SYSTEM_CHECKS = ["django_ratelimit.W001"]

# API configuration
API_PAGE_SIZE = int(os.environ.get("API_PAGE_SIZE", "50"))
API_MAX_PAGE_SIZE = int(os.environ.get("API_MAX_PAGE_SIZE", "500"))
API_RATE_LIMIT = os.environ.get("API_RATE_LIMIT", "120/m")

# Catalog values offered by the asset and employee forms.
ASSETDESK_CATALOG = {
    "asset_categories": [
        "Electronics",
        "Furniture",
        "Vehicles",
        "Machinery",
        "Software",
        "IT Equipment",
        "Office Furniture",
        "Other",
    ],
    "asset_statuses": [
        "Active",
        "Inactive",
        "Maintenance",
        "Repaired",
        "Retired",
        "Lost",
    ],
    "departments": [
        "IT",
        "HR",
        "Finance",
        "Marketing",
        "Sales",
        "Operations",
        "Legal",
        "Engineering",
    ],
    "positions": [
        "Manager",
        "Developer",
        "Designer",
        "Analyst",
        "Coordinator",
        "Specialist",
        "Assistant",
        "Director",
    ],
}

# django-unfold configuration
UNFOLD = {
    "SITE_TITLE": SITE_NAME,
    "SITE_HEADER": SITE_SHORT_NAME,
    "SITE_SYMBOL": "inventory_2",
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "items": [
                    {
                        "title": "Dashboard",
                        "icon": "dashboard",
                        "link": reverse_lazy("admin:index"),
                    },
                ],
            },
            {
                "title": "Tracking",
                "icon": "inventory_2",
                "collapsible": True,
                "items": [
                    {
                        "title": "Assets",
                        "icon": "package_2",
                        "link": reverse_lazy("admin:assets_asset_changelist"),
                    },
                    {
                        "title": "Employees",
                        "icon": "badge",
                        "link": reverse_lazy(
                            "admin:employees_employee_changelist"
                        ),
                    },
                    {
                        "title": "Handovers",
                        "icon": "swap_horiz",
                        "link": reverse_lazy(
                            "admin:employees_handover_changelist"
                        ),
                    },
                ],
            },
            {
                "title": "Users & Auth",
                "icon": "people",
                "collapsible": True,
                "items": [
                    {
                        "title": "Users",
                        "icon": "person",
                        "link": reverse_lazy("admin:auth_user_changelist"),
                    },
                    {
                        "title": "Groups",
                        "icon": "group",
                        "link": reverse_lazy("admin:auth_group_changelist"),
                    },
                ],
            },
        ],
    },
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Logging: tracebacks reach container logs even with DEBUG=False
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "django.request": {
            "handlers": ["console"],
            "level": "DEBUG",
            "propagate": False,
        },
        "assets": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "employees": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

# Startup validation
from django.core.exceptions import ImproperlyConfigured  # noqa: E402

_missing = []

# In production, SECRET_KEY must be explicitly set
if not DEBUG and SECRET_KEY == "dev-secret-key-change-in-production":
    _missing.append("SECRET_KEY")

# In production, DATABASE_URL must be set
if not DEBUG and not DATABASE_URL:
    _missing.append("DATABASE_URL")

if _missing:
    raise ImproperlyConfigured(
        f"Missing required environment variable(s): {', '.join(_missing)}."
    )
