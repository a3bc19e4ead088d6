"""
Orders API - order entry, lifecycle and bills.
"""

from http import HTTPStatus

from flask import Blueprint, Response, current_app, jsonify, request

from orderly_shared.datetime_utils import parse_day, utcnow
from orderly_shared.logging_config import get_logger
from orderly_shared.query_cache import ORDERS
from orderly_shared.schemas import CreateOrderRequest, StatusUpdateRequest, parse_payload
from orderly_shared.serializers import (
    serialize_order,
    serialize_order_preview,
    success_response,
)
from orderly_shared.services.bill_pdf_service import generate_bill
from orderly_shared.services.menu_service import list_menu_items
from orderly_shared.services.order_draft import OrderDraft
from orderly_shared.services.order_service import (
    advance_order,
    delete_order,
    get_order,
    list_orders,
    set_status,
)

from ._cache import query_cache

# Create blueprint without url_prefix (inherited from parent)
orders_bp = Blueprint("orders", __name__)
logger = get_logger(__name__)


def _draft_from_request() -> OrderDraft:
    data = parse_payload(CreateOrderRequest, request.get_json(silent=True))
    draft = OrderDraft.from_menu(list_menu_items(), outlet_id=data.outlet_id)
    draft.select_customer(data.customer_id)
    for item in data.items:
        draft.add_line_item(item.menu_item_id, item.quantity)
    return draft


@orders_bp.get("/orders")
def get_orders():
    """
    List orders, newest first.

    Query params:
    - outlet_id: only orders of this outlet
    - date: YYYY-MM-DD, only orders created that day
    - q: match on order id, customer name, phone or table number; searches
      today when no date is given
    """
    outlet_id = request.args.get("outlet_id") or None
    day = parse_day(request.args.get("date"))
    query = request.args.get("q") or None
    if query and day is None:
        day = utcnow().date()
    params = {"outlet_id": outlet_id, "day": day, "q": query}

    orders = query_cache().get_or_load(
        ORDERS, params, lambda: list_orders(outlet_id=outlet_id, day=day, query=query)
    )
    return jsonify(success_response([serialize_order(order) for order in orders]))


@orders_bp.post("/orders/preview")
def preview_order():
    """Price an order without saving it."""
    draft = _draft_from_request()
    return jsonify(success_response(serialize_order_preview(draft.preview())))


@orders_bp.post("/orders")
def post_order():
    """
    Create a pending order.

    Body:
        {
            "customer_id": str,
            "outlet_id"?: str,
            "items": [{"menu_item_id": str, "quantity": int >= 1}, ...]
        }
    """
    draft = _draft_from_request()
    order = draft.commit()
    return jsonify(success_response(serialize_order(order))), HTTPStatus.CREATED


@orders_bp.get("/orders/<order_id>")
def get_single_order(order_id: str):
    return jsonify(success_response(serialize_order(get_order(order_id))))


@orders_bp.post("/orders/<order_id>/advance")
def post_advance_order(order_id: str):
    """Move the order one step forward (pending -> ready -> paid)."""
    return jsonify(success_response(serialize_order(advance_order(order_id))))


@orders_bp.patch("/orders/<order_id>/status")
def patch_order_status(order_id: str):
    """
    Set the order status.

    Body:
        {"status": "ready" | "paid"} (must be the next status)
    """
    data = parse_payload(StatusUpdateRequest, request.get_json(silent=True))
    return jsonify(success_response(serialize_order(set_status(order_id, data.status))))


@orders_bp.delete("/orders/<order_id>")
def remove_order(order_id: str):
    delete_order(order_id)
    return jsonify(success_response({"deleted": order_id}))


@orders_bp.get("/orders/<order_id>/bill")
def get_order_bill(order_id: str):
    """Download the bill of a paid order as a PDF attachment."""
    pdf_bytes, filename = generate_bill(
        order_id,
        restaurant_name=current_app.config["RESTAURANT_NAME"],
        currency_symbol=current_app.config["CURRENCY_SYMBOL"],
    )
    return Response(
        pdf_bytes,
        mimetype="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Content-Length": str(len(pdf_bytes)),
        },
    )
