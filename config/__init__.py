import os

_ALIASES = {
    "dev": "config.development",
    "development": "config.development",
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Dotted path of the settings module to load.

    WORKFORCE_SETTINGS names a module outright; otherwise APP_ENV is looked up
    in the aliases and unknown values fall back to development.
    """
    explicit = os.getenv("WORKFORCE_SETTINGS", "").strip()
    if explicit:
        return explicit
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ALIASES.get(env, "config.development")
