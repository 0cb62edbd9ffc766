from .base import *

DEBUG = False
SECRET_KEY = "test-arena-not-secret"
ALLOWED_HOSTS = ["testserver", "localhost"]

# File-backed so threaded tests share one database; IMMEDIATE makes concurrent
# writers queue on the database lock instead of failing on lock upgrade.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "arena-test.sqlite3",
        "ATOMIC_REQUESTS": False,
        "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": 20},
        "TEST": {"NAME": BASE_DIR / ".pytest-arena.sqlite3"},
    },
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "arena-test",
    },
}
