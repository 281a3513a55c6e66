import os


def get_settings_module() -> str:
    """Settings module name picked from APP_ENV; development by default."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "dayflow_hrms.settings.production"

    if env in {"test", "testing"}:
        return "dayflow_hrms.settings.testing"

    return "dayflow_hrms.settings.development"
