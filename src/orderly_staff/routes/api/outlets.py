"""
Outlets API - outlets and their order and revenue views.
"""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from orderly_shared.datetime_utils import utcnow
from orderly_shared.logging_config import get_logger
from orderly_shared.query_cache import OUTLET_ORDERS, OUTLET_STATS, OUTLETS
from orderly_shared.serializers import (
    serialize_order,
    serialize_outlet,
    serialize_report_row,
    success_response,
)
from orderly_shared.services.outlet_service import (
    create_outlet,
    get_outlet,
    list_outlets,
    outlet_statistics,
    recent_outlet_orders,
)

from ._cache import query_cache
from ._params import window_days

outlets_bp = Blueprint("outlets", __name__)
logger = get_logger(__name__)


@outlets_bp.get("/outlets")
def get_outlets():
    outlets = query_cache().get_or_load(OUTLETS, None, list_outlets)
    return jsonify(success_response([serialize_outlet(outlet) for outlet in outlets]))


@outlets_bp.post("/outlets")
def post_outlet():
    payload = request.get_json(silent=True) or {}
    outlet = create_outlet(payload)
    return jsonify(success_response(serialize_outlet(outlet))), HTTPStatus.CREATED


@outlets_bp.get("/outlets/<outlet_id>")
def get_single_outlet(outlet_id: str):
    return jsonify(success_response(serialize_outlet(get_outlet(outlet_id))))


@outlets_bp.get("/outlets/<outlet_id>/orders")
def get_outlet_orders(outlet_id: str):
    """Most recent orders placed at the outlet."""
    orders = query_cache().get_or_load(
        OUTLET_ORDERS, {"outlet_id": outlet_id}, lambda: recent_outlet_orders(outlet_id)
    )
    return jsonify(success_response([serialize_order(order) for order in orders]))


@outlets_bp.get("/outlets/<outlet_id>/statistics")
def get_outlet_statistics(outlet_id: str):
    """
    Paid revenue per day for the outlet.

    Query params:
    - days: window length (default REPORT_WINDOW_DAYS)
    """
    days = window_days()
    today = utcnow().date()

    stats = query_cache().get_or_load(
        OUTLET_STATS,
        {"outlet_id": outlet_id, "days": days, "today": today},
        lambda: outlet_statistics(outlet_id, days=days, today=today),
    )
    return jsonify(
        success_response(
            {
                "outlet_id": stats["outlet_id"],
                "days": [serialize_report_row(row) for row in stats["days"]],
                "total_orders": stats["total_orders"],
                "total_revenue": float(stats["total_revenue"]),
            }
        )
    )
