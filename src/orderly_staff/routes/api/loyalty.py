"""
Loyalty API - program settings.
"""

from flask import Blueprint, jsonify, request

from orderly_shared.logging_config import get_logger
from orderly_shared.query_cache import LOYALTY_SETTINGS
from orderly_shared.serializers import serialize_loyalty_settings, success_response
from orderly_shared.services.loyalty_service import (
    get_loyalty_settings,
    update_loyalty_settings,
)

from ._cache import query_cache

loyalty_bp = Blueprint("loyalty", __name__)
logger = get_logger(__name__)


@loyalty_bp.get("/loyalty-settings")
def get_settings():
    settings = query_cache().get_or_load(LOYALTY_SETTINGS, None, get_loyalty_settings)
    return jsonify(success_response(serialize_loyalty_settings(settings)))


@loyalty_bp.put("/loyalty-settings")
def put_settings():
    """
    Body:
        {"points_per_amount": int > 0, "amount_threshold": int > 0}
    """
    settings = update_loyalty_settings(request.get_json(silent=True) or {})
    return jsonify(success_response(serialize_loyalty_settings(settings)))
