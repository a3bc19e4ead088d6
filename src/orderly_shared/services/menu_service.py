"""
Menu catalog management.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select

from orderly_shared.constants import MONEY_QUANTUM
from orderly_shared.db import get_session
from orderly_shared.errors import NotFoundError
from orderly_shared.logging_config import get_logger
from orderly_shared.models import MenuItem, OrderItem
from orderly_shared.query_cache import menu_changed
from orderly_shared.schemas import MenuItemCreate, MenuItemRecord, MenuItemUpdate, parse_payload
from orderly_shared.validation import ValidationError

logger = get_logger(__name__)


def list_menu_items() -> list[MenuItemRecord]:
    """All menu items, newest first."""
    with get_session() as session:
        items = (
            session.execute(
                select(MenuItem).order_by(MenuItem.created_at.desc(), MenuItem.name)
            )
            .scalars()
            .all()
        )
        return [MenuItemRecord.model_validate(item) for item in items]


def get_menu_item(item_id: str) -> MenuItemRecord:
    with get_session() as session:
        item = session.get(MenuItem, item_id)
        if item is None:
            raise NotFoundError(f"Menu item {item_id} not found")
        return MenuItemRecord.model_validate(item)


def create_menu_item(payload: dict[str, Any]) -> MenuItemRecord:
    data = parse_payload(MenuItemCreate, payload)

    with get_session() as session:
        item = MenuItem(
            name=data.name,
            price=data.price.quantize(MONEY_QUANTUM),
            description=data.description,
            photo_url=data.photo_url,
        )
        session.add(item)
        session.flush()
        record = MenuItemRecord.model_validate(item)

    logger.info(f"Created menu item {record.id} ({record.name})")
    menu_changed.send("menu_service", item_id=record.id)
    return record


def update_menu_item(item_id: str, payload: dict[str, Any]) -> MenuItemRecord:
    """
    Partial update. Omitted fields keep their value; name and price cannot be
    cleared.
    """
    payload = payload or {}
    data = parse_payload(MenuItemUpdate, payload)
    for field in ("name", "price"):
        if field in payload and getattr(data, field) is None:
            raise ValidationError(f"{field} cannot be empty")

    with get_session() as session:
        item = session.get(MenuItem, item_id)
        if item is None:
            raise NotFoundError(f"Menu item {item_id} not found")

        if data.name is not None:
            item.name = data.name
        if data.price is not None:
            item.price = data.price.quantize(MONEY_QUANTUM)
        if "description" in payload:
            item.description = data.description or None
        if "photo_url" in payload:
            item.photo_url = data.photo_url or None
        session.flush()
        record = MenuItemRecord.model_validate(item)

    logger.info(f"Updated menu item {item_id}")
    menu_changed.send("menu_service", item_id=item_id)
    return record


def delete_menu_item(item_id: str) -> None:
    """
    Delete a menu item.

    Items already referenced by order line items are kept so historical orders
    still resolve their names.
    """
    with get_session() as session:
        item = session.get(MenuItem, item_id)
        if item is None:
            raise NotFoundError(f"Menu item {item_id} not found")

        references = session.scalar(
            select(func.count(OrderItem.id)).where(OrderItem.menu_item_id == item_id)
        )
        if references:
            raise ValidationError("Menu item is used by existing orders and cannot be deleted")

        session.delete(item)

    logger.info(f"Deleted menu item {item_id}")
    menu_changed.send("menu_service", item_id=item_id)
