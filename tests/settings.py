SECRET_KEY = "schema-catalog-tests"
DEBUG = False
USE_TZ = True
TIME_ZONE = "UTC"
INSTALLED_APPS = [
    "django.contrib.contenttypes",
]
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

SCHEMA_CATALOG = {
    "schema": {
        "enabled": None,
    },
    "introspection": {
        "cache_enabled": True,
        "timeout_seconds": 5,
    },
}
