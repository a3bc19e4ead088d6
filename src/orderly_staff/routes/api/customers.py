"""
Customers API - customer records, search and loyalty corrections.
"""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from orderly_shared.logging_config import get_logger
from orderly_shared.query_cache import CUSTOMERS
from orderly_shared.schemas import LoyaltyAdjustment, parse_payload
from orderly_shared.serializers import serialize_customer, success_response
from orderly_shared.services.customer_service import (
    adjust_loyalty_points,
    delete_customer,
    get_customer,
    list_customers,
    search,
    upsert_customer,
)

from ._cache import query_cache

# Create blueprint without url_prefix (inherited from parent)
customers_bp = Blueprint("customers", __name__)
logger = get_logger(__name__)


@customers_bp.get("/customers")
def get_customers():
    """
    List customers, newest first.

    Query params:
    - q: case-insensitive match on name, phone, email or table number
    """
    customers = query_cache().get_or_load(CUSTOMERS, None, list_customers)
    matches = search(customers, request.args.get("q"))
    return jsonify(success_response([serialize_customer(customer) for customer in matches]))


@customers_bp.get("/customers/<customer_id>")
def get_single_customer(customer_id: str):
    return jsonify(success_response(serialize_customer(get_customer(customer_id))))


@customers_bp.post("/customers")
def post_customer():
    payload = request.get_json(silent=True) or {}
    customer = upsert_customer(payload)
    return jsonify(success_response(serialize_customer(customer))), HTTPStatus.CREATED


@customers_bp.put("/customers/<customer_id>")
def put_customer(customer_id: str):
    payload = request.get_json(silent=True) or {}
    customer = upsert_customer(payload, customer_id=customer_id)
    return jsonify(success_response(serialize_customer(customer)))


@customers_bp.delete("/customers/<customer_id>")
def remove_customer(customer_id: str):
    delete_customer(customer_id)
    return jsonify(success_response({"deleted": customer_id}))


@customers_bp.post("/customers/<customer_id>/loyalty-points")
def post_loyalty_adjustment(customer_id: str):
    """
    Correct a customer's loyalty balance.

    Body:
        {"delta": int} (negative to deduct; the balance never drops below zero)
    """
    data = parse_payload(LoyaltyAdjustment, request.get_json(silent=True))
    customer = adjust_loyalty_points(customer_id, data.delta)
    return jsonify(success_response(serialize_customer(customer)))
