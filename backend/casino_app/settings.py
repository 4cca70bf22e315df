from pathlib import Path
import os
BASE_DIR = Path(__file__).resolve().parent.parent
from dotenv import load_dotenv
load_dotenv()
SECRET_KEY = os.getenv("SECRET_KEY", "django-insecure-casino-ledger-dev-key-change-me")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = [h for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h]


# Application definition

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'channels',
    'rest_framework',
    'corsheaders',
    'core',
    'accounts',
    'wallets',
    'roulette',
    'poker',
    'token_market',
]


MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

AUTH_USER_MODEL = 'accounts.User'

ROOT_URLCONF = 'casino_app.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

ASGI_APPLICATION = 'casino_app.asgi.application'

# Channels + Redis
REDIS_URL = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")
CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels_redis.core.RedisChannelLayer",
        "CONFIG": {
            "hosts": [REDIS_URL],
        },
    },
}

if os.getenv("POSTGRES_DB"):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.getenv("POSTGRES_DB"),
            'USER': os.getenv("POSTGRES_USER", "postgres"),
            'PASSWORD': os.getenv("POSTGRES_PASSWORD", ""),
            'HOST': os.getenv("POSTGRES_HOST", "127.0.0.1"),
            'PORT': os.getenv("POSTGRES_PORT", "5432"),
            'ATOMIC_REQUESTS': False,
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}


CORS_ALLOW_CREDENTIALS = True

CORS_ALLOWED_ORIGINS = [o for o in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o]

CSRF_TRUSTED_ORIGINS = CORS_ALLOWED_ORIGINS

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'core.parsers.DecimalJSONParser',
        'rest_framework.parsers.FormParser',
        'rest_framework.parsers.MultiPartParser',
    ],
    'EXCEPTION_HANDLER': 'core.exceptions.casino_exception_handler',
    'UNAUTHENTICATED_USER': None,
}


# Casino
ROULETTE_MAX_BETS_PER_GAME = int(os.getenv("ROULETTE_MAX_BETS_PER_GAME", "20"))

BET_RATE_LIMIT = int(os.getenv("BET_RATE_LIMIT", "60"))  # bets per window
BET_RATE_WINDOW_SECONDS = int(os.getenv("BET_RATE_WINDOW_SECONDS", "60"))

# Token bonding curve (amounts in SOL)
TOKEN_BASE_PRICE = os.getenv("TOKEN_BASE_PRICE", "0.000001")
TOKEN_TARGET_RESERVE = os.getenv("TOKEN_TARGET_RESERVE", "100")
TOKEN_MAX_PRICE_MULTIPLIER = os.getenv("TOKEN_MAX_PRICE_MULTIPLIER", "10")
TOKEN_TOTAL_SUPPLY = os.getenv("TOKEN_TOTAL_SUPPLY", "1000000000")
TOKEN_MIN_RESERVE = os.getenv("TOKEN_MIN_RESERVE", "1")
TOKEN_PRICE_SAMPLE_INTERVAL = int(os.getenv("TOKEN_PRICE_SAMPLE_INTERVAL", "60"))  # seconds
TOKEN_SAMPLER_LOCK_TTL = int(os.getenv("TOKEN_SAMPLER_LOCK_TTL", "30"))  # seconds
TOKEN_NAME = os.getenv("TOKEN_NAME", "Casino Token")
TOKEN_SYMBOL = os.getenv("TOKEN_SYMBOL", "CSNO")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        app: {"level": LOG_LEVEL}
        for app in ("core", "accounts", "wallets", "roulette", "poker", "token_market")
    },
}


AUTH_PASSWORD_VALIDATORS = []


# Internationalization
# https://docs.djangoproject.com/en/5.2/topics/i18n/

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = True


# Static files (CSS, JavaScript, Images)
# https://docs.djangoproject.com/en/5.2/howto/static-files/

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / "staticfiles"
# Default primary key field type
# https://docs.djangoproject.com/en/5.2/ref/settings/#default-auto-field

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
