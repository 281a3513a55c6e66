"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SYNC_INTERVAL_MINUTES = 5
DEFAULT_TREND_DAYS = 30
MAX_TREND_DAYS = 3650
DEFAULT_STORE_TIMEOUT_MS = 5000

MIN_PASSWORD_LENGTH = 8
GENERATED_PASSWORD_LENGTH = 12
VERIFICATION_TOKEN_BYTES = 32
PASSWORD_SPECIAL_CHARS = "!@#$%^&*"

EMPLOYEE_ID_PREFIX = "EMP"
COMPANY_CODE_BASE_LENGTH = 6
COMPANY_CODE_MAX_LENGTH = 10

UNASSIGNED_TEAM = "Unassigned"
