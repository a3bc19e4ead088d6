"""
Utilities to centralize configuration handling across the orderly services.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

INSECURE_SECRET_KEYS = {
    "",
    "change-me-please",
    "super-secret-change-me",
    "your-secret-key-here",
}


@dataclass
class AppConfig:
    """Simple container for application level settings."""

    app_name: str
    # PostgreSQL database
    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_sslmode: str
    database_url: str
    # App settings
    secret_key: str
    log_level: str
    restaurant_name: str
    currency_symbol: str
    report_window_days: int
    debug_mode: bool
    cors_allowed_origins: list[str]
    num_proxies: int

    def get_bool(self, key: str, default: bool = False) -> bool:
        """
        Get boolean config value from AppConfig.

        Args:
            key: Configuration key (e.g., 'debug_mode')
            default: Default value if not set

        Returns:
            bool: Configuration value
        """
        value = getattr(self, key, default)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @property
    def sqlalchemy_uri(self) -> str:
        """
        SQLAlchemy URI for the backend store.

        DATABASE_URL wins when set; otherwise a PostgreSQL URI using psycopg2 is
        assembled from the POSTGRES_* settings.
        """
        if self.database_url:
            return self.database_url
        ssl_arg = f"?sslmode={self.db_sslmode}" if self.db_sslmode else ""
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}{ssl_arg}"
        )


def _read_env(name: str, default: str | None = None) -> str:
    """
    Internal helper to fetch environment variables with support for defaults.
    """
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required environment variable '{name}'")
        value = default
    return value


def read_bool(name: str, default: str = "false") -> bool:
    value = _read_env(name, default)
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_list(name: str) -> list[str]:
    raw = _read_env(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def validate_required_env_vars(skip_in_debug: bool = False) -> None:
    """
    Validate that all required environment variables are set.

    Fails fast during startup rather than encountering errors later.

    Args:
        skip_in_debug: If True, skip validation when DEBUG_MODE=true

    Raises:
        RuntimeError: If any required variable is missing or has an invalid value
    """
    if skip_in_debug and read_bool("DEBUG_MODE", "false"):
        return

    errors = []

    if os.getenv("SECRET_KEY", "") in INSECURE_SECRET_KEYS:
        errors.append(
            "SECRET_KEY must be configured with a secure random value. "
            'Generate with: python3 -c "import secrets; print(secrets.token_urlsafe(32))"'
        )

    if not os.getenv("DATABASE_URL"):
        for name in ("POSTGRES_HOST", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB"):
            if not os.getenv(name):
                errors.append(f"{name} must be configured (or set DATABASE_URL)")

    window = os.getenv("REPORT_WINDOW_DAYS", "")
    if window:
        try:
            if int(window) < 1:
                errors.append("REPORT_WINDOW_DAYS must be a positive integer")
        except ValueError:
            errors.append(f"REPORT_WINDOW_DAYS must be a valid integer, got: {window}")

    if errors:
        error_msg = "\nConfiguration errors - missing or invalid environment variables:\n"
        for error in errors:
            error_msg += f"  - {error}\n"
        raise RuntimeError(error_msg)


def load_config(app_name: str) -> AppConfig:
    """
    Produce an AppConfig instance populated from environment variables.

    Each service passes its desired `app_name` to keep logs easy to tell apart
    while still reusing the same config loader.
    """
    return AppConfig(
        app_name=app_name,
        db_host=_read_env("POSTGRES_HOST", "localhost"),
        db_port=int(_read_env("POSTGRES_PORT", "5432")),
        db_user=_read_env("POSTGRES_USER", "orderly"),
        db_password=_read_env("POSTGRES_PASSWORD", "orderly"),
        db_name=_read_env("POSTGRES_DB", "orderly"),
        db_sslmode=_read_env("POSTGRES_SSLMODE", "disable"),
        database_url=_read_env("DATABASE_URL", ""),
        secret_key=_read_env("SECRET_KEY", "super-secret-change-me"),
        log_level=_read_env("LOG_LEVEL", "INFO"),
        restaurant_name=_read_env("RESTAURANT_NAME", "The Walls of Waffle"),
        currency_symbol=_read_env("CURRENCY_SYMBOL", "Rs."),
        report_window_days=int(_read_env("REPORT_WINDOW_DAYS", "30")),
        debug_mode=read_bool("DEBUG_MODE", "false"),
        cors_allowed_origins=_read_list("CORS_ALLOWED_ORIGINS"),
        num_proxies=int(_read_env("NUM_PROXIES", "0")),
    )
