import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DB_NAME", "dayflow_hrms"),
    "timeout_ms": int(os.getenv("STORE_TIMEOUT_MS", "5000")),
}

# Flat JSON mirror of users / attendance / leaves
MIRROR_DATA_DIR = os.getenv("MIRROR_DATA_DIR", "data")
SYNC_ENABLED = bool(int(os.getenv("SYNC_ENABLED", "1")))
SYNC_INTERVAL_MINUTES = float(os.getenv("SYNC_INTERVAL_MINUTES", "5"))

DEBUG = bool(int(os.getenv("DEBUG", "1")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Optional: seed demo accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
