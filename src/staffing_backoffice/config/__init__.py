import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, default is development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "staffing_backoffice.config.production"

    if env in {"test", "testing"}:
        return "staffing_backoffice.config.testing"

    return "staffing_backoffice.config.development"
