import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workshop_time"),
}

DEBUG = True

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql").lower()
LOCK_TIMEOUT_SECONDS = float(os.getenv("LOCK_TIMEOUT_SECONDS", "5"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# Used when STORE_BACKEND=memory (no targets/credentials tables available)
MEMORY_TARGETS = {
    "active_orders": [1, 2],
    "activity_categories": {3: False, 4: True},
    "break_categories": [1, 2],
}
MEMORY_CREDENTIALS = {
    "employee_number": {"M001": 1, "M002": 2},
    "pin": {"1234": 1, "5678": 2},
}

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
