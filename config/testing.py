import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workshop_time_test"),
}

DEBUG = False
TESTING = True

STORE_BACKEND = "memory"
LOCK_TIMEOUT_SECONDS = 0.5
LOG_LEVEL = "WARNING"

MEMORY_TARGETS = {
    "active_orders": [1],
    "activity_categories": {3: False, 4: True},
    "break_categories": [1],
}
MEMORY_CREDENTIALS = {
    "employee_number": {"M001": 1},
    "pin": {"1234": 1},
}

AUTO_INIT_DB = False
AUTO_SEED_DB = False
