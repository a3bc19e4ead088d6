"""
Staff API - Modular Blueprint Structure

Each module handles a specific resource; they are all mounted under /api.
"""

from flask import Blueprint

# Create main API blueprint
api_bp = Blueprint("api", __name__)

# Import and register sub-blueprints
from .customers import customers_bp  # noqa: E402
from .loyalty import loyalty_bp  # noqa: E402
from .menu import menu_bp  # noqa: E402
from .orders import orders_bp  # noqa: E402
from .outlets import outlets_bp  # noqa: E402
from .reports import reports_bp  # noqa: E402

api_bp.register_blueprint(menu_bp)
api_bp.register_blueprint(customers_bp)
api_bp.register_blueprint(orders_bp)
api_bp.register_blueprint(reports_bp)
api_bp.register_blueprint(outlets_bp)
api_bp.register_blueprint(loyalty_bp)


# Health check endpoint
@api_bp.get("/health")
def health_check():
    """Simple health check endpoint"""
    return {"status": "ok", "service": "orderly-staff-api"}, 200


__all__ = ["api_bp"]
