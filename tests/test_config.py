import pytest

from orderly_shared.config import load_config, validate_required_env_vars


def test_database_url_wins(monkeypatch):
    config = load_config("orderly-test")
    assert config.sqlalchemy_uri == "sqlite:///:memory:"


def test_postgres_uri_from_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL")
    monkeypatch.setenv("POSTGRES_HOST", "db")
    monkeypatch.setenv("POSTGRES_USER", "staff")
    monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
    monkeypatch.setenv("POSTGRES_DB", "orders")
    monkeypatch.setenv("POSTGRES_SSLMODE", "require")
    config = load_config("orderly-test")
    assert config.sqlalchemy_uri == "postgresql+psycopg2://staff:pw@db:5432/orders?sslmode=require"


def test_defaults(monkeypatch):
    config = load_config("orderly-test")
    assert config.currency_symbol == "Rs."
    assert config.report_window_days == 30
    assert config.debug_mode is True
    assert config.cors_allowed_origins == []


def test_validation_skipped_in_debug(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "super-secret-change-me")
    validate_required_env_vars(skip_in_debug=True)


def test_insecure_secret_rejected(monkeypatch):
    monkeypatch.setenv("DEBUG_MODE", "false")
    monkeypatch.setenv("SECRET_KEY", "super-secret-change-me")
    with pytest.raises(RuntimeError):
        validate_required_env_vars(skip_in_debug=True)


def test_bad_report_window_rejected(monkeypatch):
    monkeypatch.setenv("REPORT_WINDOW_DAYS", "0")
    with pytest.raises(RuntimeError):
        validate_required_env_vars()
