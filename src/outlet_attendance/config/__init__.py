import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unknown falls back to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "outlet_attendance.config.production"

    if env in {"test", "testing"}:
        return "outlet_attendance.config.testing"

    return "outlet_attendance.config.development"


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))
