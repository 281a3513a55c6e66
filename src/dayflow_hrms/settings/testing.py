import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DB_NAME", "dayflow_hrms_test"),
    "timeout_ms": int(os.getenv("STORE_TIMEOUT_MS", "1000")),
}

MIRROR_DATA_DIR = os.getenv("MIRROR_DATA_DIR", "data-test")
SYNC_ENABLED = False
SYNC_INTERVAL_MINUTES = 5.0

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_SEED_DB = False
