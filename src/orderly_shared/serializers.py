"""
Serializers for consistent API responses.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from orderly_shared.schemas import (
    CustomerRecord,
    LoyaltySettingsRecord,
    MenuItemRecord,
    OrderRecord,
    OutletRecord,
)
from orderly_shared.services.customer_service import display_label


def _money(value) -> float:
    return float(value) if value is not None else 0.0


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_menu_item(item: MenuItemRecord) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "price": _money(item.price),
        "description": item.description,
        "photo_url": item.photo_url,
        "created_at": _iso(item.created_at),
    }


def serialize_customer(customer: CustomerRecord | None) -> dict[str, Any] | None:
    if customer is None:
        return None
    return {
        "id": customer.id,
        "name": customer.name,
        "phone": customer.phone,
        "table_number": customer.table_number,
        "email": customer.email,
        "loyalty_points": customer.loyalty_points,
        "display_label": display_label(customer),
        "created_at": _iso(customer.created_at),
    }


def serialize_line_item(item) -> dict[str, Any]:
    return {
        "id": item.id,
        "menu_item_id": item.menu_item_id,
        "menu_item_name": item.menu_item_name,
        "quantity": item.quantity,
        "unit_price": _money(item.unit_price),
        "subtotal": _money(item.subtotal),
    }


def serialize_order(order: OrderRecord) -> dict[str, Any]:
    return {
        "id": order.id,
        "customer_id": order.customer_id,
        "outlet_id": order.outlet_id,
        "status": order.status.value,
        "total_amount": _money(order.total_amount),
        "created_at": _iso(order.created_at),
        "customer": serialize_customer(order.customer),
        "items": [serialize_line_item(item) for item in order.items],
    }


def serialize_order_preview(preview: dict[str, Any]) -> dict[str, Any]:
    return {
        "customer_id": preview["customer_id"],
        "outlet_id": preview["outlet_id"],
        "items": [serialize_line_item(item) for item in preview["items"]],
        "total_amount": _money(preview["total_amount"]),
    }


def serialize_outlet(outlet: OutletRecord) -> dict[str, Any]:
    return {
        "id": outlet.id,
        "name": outlet.name,
        "address": outlet.address,
        "phone": outlet.phone,
        "admin_id": outlet.admin_id,
        "created_at": _iso(outlet.created_at),
    }


def serialize_loyalty_settings(settings: LoyaltySettingsRecord) -> dict[str, Any]:
    return {
        "points_per_amount": settings.points_per_amount,
        "amount_threshold": settings.amount_threshold,
    }


def serialize_report_row(row: dict[str, Any]) -> dict[str, Any]:
    """Report rows carry a ``date`` or ``month`` key plus revenue and count."""
    serialized = {}
    for key, value in row.items():
        if isinstance(value, (date, datetime)):
            serialized[key] = value.isoformat()
        elif isinstance(value, Decimal):
            serialized[key] = _money(value)
        else:
            serialized[key] = value
    return serialized


def success_response(data: Any, message: str | None = None) -> dict[str, Any]:
    """Create a standardized success response."""
    response = {"status": "success", "data": data, "error": None}
    if message:
        response["message"] = message
    return response


def error_response(error: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create a standardized error response."""
    response = {"status": "error", "data": None, "error": error}
    if details:
        response["details"] = details
    return response
