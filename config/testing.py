SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"
STORAGE_PATH = None
DB_CONFIG = {}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ENFORCE_WEEKDAYS = True
