"""
Factory for the staff-facing order management API.

Authentication is handled in front of this service; every request reaching it
is trusted.
"""

from __future__ import annotations

from typing import Any

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from orderly_shared.config import load_config, validate_required_env_vars
from orderly_shared.db import init_db, init_engine
from orderly_shared.error_handlers import register_error_handlers
from orderly_shared.logging_config import configure_logging, get_logger
from orderly_shared.models import Base
from orderly_shared.query_cache import QueryCache

logger = get_logger(__name__)

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    """
    Build the Flask application that powers the staff console API.

    Args:
        config_overrides: Extra Flask config values, applied last (tests use
            this to set TESTING)
    """
    overrides = config_overrides or {}

    # Validate all required environment variables (fail-fast)
    validate_required_env_vars(skip_in_debug=True)

    config = load_config("orderly-staff")
    configure_logging(config.app_name, config.log_level)

    app = Flask(__name__)

    # Initialize database engine first (before any DB queries)
    init_engine(config)
    init_db(Base.metadata)

    app.config["SECRET_KEY"] = config.secret_key
    app.config["APP_NAME"] = config.app_name
    app.config["RESTAURANT_NAME"] = config.restaurant_name
    app.config["CURRENCY_SYMBOL"] = config.currency_symbol
    app.config["REPORT_WINDOW_DAYS"] = config.report_window_days
    app.config["DEBUG_MODE"] = config.debug_mode
    app.config.update(overrides)

    query_cache = QueryCache()
    query_cache.connect_signals()
    app.extensions["query_cache"] = query_cache

    register_error_handlers(app)

    # ProxyFix: Trust X-Forwarded-* headers from reverse proxy
    if config.num_proxies > 0:
        app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for=config.num_proxies,
            x_proto=config.num_proxies,
            x_host=config.num_proxies,
            x_port=config.num_proxies,
        )

    from orderly_staff.routes.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    # Configure CORS with secure defaults
    allowed_origins = config.cors_allowed_origins
    if config.debug_mode or not allowed_origins:
        allowed_origins = DEV_ORIGINS
    CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

    logger.info(
        f"{config.app_name} ready for {config.restaurant_name} "
        f"(debug={config.debug_mode}, origins={len(allowed_origins)})"
    )
    return app
