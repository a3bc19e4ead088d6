"""
Menu API - menu item catalog management.
"""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from orderly_shared.logging_config import get_logger
from orderly_shared.query_cache import MENU_ITEMS
from orderly_shared.serializers import serialize_menu_item, success_response
from orderly_shared.services.menu_service import (
    create_menu_item,
    delete_menu_item,
    get_menu_item,
    list_menu_items,
    update_menu_item,
)

from ._cache import query_cache

# Create blueprint without url_prefix (inherited from parent)
menu_bp = Blueprint("menu", __name__)
logger = get_logger(__name__)


@menu_bp.get("/menu-items")
def get_menu_items():
    """List every menu item, newest first."""
    items = query_cache().get_or_load(MENU_ITEMS, None, list_menu_items)
    return jsonify(success_response([serialize_menu_item(item) for item in items]))


@menu_bp.get("/menu-items/<item_id>")
def get_single_menu_item(item_id: str):
    return jsonify(success_response(serialize_menu_item(get_menu_item(item_id))))


@menu_bp.post("/menu-items")
def post_menu_item():
    """
    Create a menu item.

    Body:
        {"name": str, "price": number >= 0, "description"?: str, "photo_url"?: str}
    """
    payload = request.get_json(silent=True) or {}
    item = create_menu_item(payload)
    return jsonify(success_response(serialize_menu_item(item))), HTTPStatus.CREATED


@menu_bp.put("/menu-items/<item_id>")
def put_menu_item(item_id: str):
    """Update the fields present in the body; omitted fields keep their value."""
    payload = request.get_json(silent=True) or {}
    item = update_menu_item(item_id, payload)
    return jsonify(success_response(serialize_menu_item(item)))


@menu_bp.delete("/menu-items/<item_id>")
def remove_menu_item(item_id: str):
    delete_menu_item(item_id)
    return jsonify(success_response({"deleted": item_id}))
