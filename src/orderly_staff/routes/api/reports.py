"""
Reports API - revenue over time.
"""

from flask import Blueprint, jsonify, request

from orderly_shared.datetime_utils import parse_day, utcnow
from orderly_shared.logging_config import get_logger
from orderly_shared.query_cache import REPORTS
from orderly_shared.serializers import serialize_report_row, success_response
from orderly_shared.services.order_service import list_orders
from orderly_shared.services.reporting_service import (
    daily_revenue_report,
    daily_summary,
    monthly_revenue_report,
)

from ._cache import query_cache
from ._params import window_days

reports_bp = Blueprint("reports", __name__)
logger = get_logger(__name__)


@reports_bp.get("/reports/daily")
def get_daily_report():
    """
    Paid revenue per day over a trailing window, oldest day first.

    Query params:
    - days: window length (default REPORT_WINDOW_DAYS)
    - outlet_id: only this outlet
    """
    days = window_days()
    outlet_id = request.args.get("outlet_id") or None
    today = utcnow().date()
    rows = query_cache().get_or_load(
        REPORTS,
        {"kind": "daily", "days": days, "outlet_id": outlet_id, "today": today},
        lambda: daily_revenue_report(days, outlet_id=outlet_id, today=today),
    )
    return jsonify(success_response([serialize_report_row(row) for row in rows]))


@reports_bp.get("/reports/monthly")
def get_monthly_report():
    """Paid revenue per calendar month."""
    outlet_id = request.args.get("outlet_id") or None
    rows = query_cache().get_or_load(
        REPORTS,
        {"kind": "monthly", "outlet_id": outlet_id},
        lambda: monthly_revenue_report(outlet_id=outlet_id),
    )
    return jsonify(success_response([serialize_report_row(row) for row in rows]))


@reports_bp.get("/reports/summary")
def get_daily_summary():
    """
    Order count and paid revenue for one day.

    Query params:
    - date: YYYY-MM-DD (default: today)
    - q: narrow by order id, customer name, phone or table number
    - outlet_id: only this outlet
    """
    day = parse_day(request.args.get("date")) or utcnow().date()
    orders = list_orders(
        outlet_id=request.args.get("outlet_id") or None,
        day=day,
        query=request.args.get("q") or None,
    )
    summary = serialize_report_row(daily_summary(orders))
    summary["date"] = day.isoformat()
    return jsonify(success_response(summary))
