import os


def get_settings_module() -> str:
    # Resolve from APP_ENV, defaulting to 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hrhub.config.production"

    if env in {"test", "testing"}:
        return "hrhub.config.testing"

    return "hrhub.config.development"


def parse_weekend_days(value: str) -> frozenset:
    """Parse '4,5' (Python weekday numbers, Monday=0) into a frozenset."""
    return frozenset(int(part) for part in value.split(",") if part.strip())
