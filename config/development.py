import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# file | mysql | memory
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")
STORAGE_PATH = os.getenv("STORAGE_PATH", "instance/attendance_storage.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_register"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Reject Saturdays/Sundays at the HTTP layer
ENFORCE_WEEKDAYS = bool(int(os.getenv("ENFORCE_WEEKDAYS", "1")))
