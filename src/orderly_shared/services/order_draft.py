"""
Order drafts: line items collected before an order is placed.

A draft holds a selected customer and an ordered list of line items. Each line
item freezes the menu price at the moment it is added. ``commit`` writes the
order and all of its line items in one transaction and then clears the draft;
when the write fails the draft is left as it was so it can be submitted again.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from orderly_shared.constants import MONEY_QUANTUM, OrderStatus
from orderly_shared.db import get_session
from orderly_shared.errors import BackendError
from orderly_shared.logging_config import get_logger
from orderly_shared.models import Customer, MenuItem, Order, OrderItem, Outlet
from orderly_shared.query_cache import orders_changed
from orderly_shared.schemas import (
    LineItemRecord,
    MenuItemRecord,
    OrderRecord,
    order_record_from_model,
)
from orderly_shared.validation import ValidationError, validate_quantity

logger = get_logger(__name__)

MenuLookup = Callable[[str], MenuItemRecord | None]


@dataclass(frozen=True)
class DraftLineItem:
    menu_item_id: str
    quantity: int
    unit_price: Decimal
    menu_item_name: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    def persisted_fields(self) -> dict:
        """Fields written to the store; the subtotal is derived on read."""
        return {
            "menu_item_id": self.menu_item_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }

    def to_record(self) -> LineItemRecord:
        return LineItemRecord(
            menu_item_id=self.menu_item_id,
            menu_item_name=self.menu_item_name,
            quantity=self.quantity,
            unit_price=self.unit_price,
        )


def lookup_menu_item(menu_item_id: str) -> MenuItemRecord | None:
    """Resolve a menu item from the store."""
    with get_session() as session:
        item = session.get(MenuItem, menu_item_id)
        return MenuItemRecord.model_validate(item) if item else None


class OrderDraft:
    """An order being put together, not yet persisted."""

    def __init__(
        self,
        menu_lookup: MenuLookup | None = None,
        customer_id: str | None = None,
        outlet_id: str | None = None,
    ):
        self._menu_lookup = menu_lookup or lookup_menu_item
        self.customer_id = customer_id
        self.outlet_id = outlet_id
        self._items: list[DraftLineItem] = []

    @classmethod
    def from_menu(cls, menu_items: Iterable[MenuItemRecord], **kwargs) -> OrderDraft:
        """Draft resolving menu items from an already loaded catalog."""
        catalog = {item.id: item for item in menu_items}
        return cls(menu_lookup=catalog.get, **kwargs)

    @property
    def line_items(self) -> list[DraftLineItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def select_customer(self, customer_id: str | None) -> OrderDraft:
        self.customer_id = customer_id or None
        return self

    def add_line_item(self, menu_item_id: str, quantity: int = 1) -> OrderDraft:
        quantity = validate_quantity(quantity)
        menu_item = self._menu_lookup(menu_item_id) if menu_item_id else None
        if menu_item is None:
            raise ValidationError(f"Unknown menu item: {menu_item_id}")

        self._items.append(
            DraftLineItem(
                menu_item_id=menu_item.id,
                quantity=quantity,
                unit_price=Decimal(menu_item.price).quantize(MONEY_QUANTUM),
                menu_item_name=menu_item.name,
            )
        )
        return self

    def remove_line_item(self, index: int) -> OrderDraft:
        if not 0 <= index < len(self._items):
            raise IndexError(f"Line item index {index} out of range")
        del self._items[index]
        return self

    def compute_total(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal("0.00"))

    def reset(self) -> None:
        self.customer_id = None
        self.outlet_id = None
        self._items = []

    def preview(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "outlet_id": self.outlet_id,
            "items": [item.to_record() for item in self._items],
            "total_amount": self.compute_total(),
        }

    def commit(self, customer_id: str | None = None) -> OrderRecord:
        """
        Persist the draft as a pending order.

        Raises:
            ValidationError: no customer selected, unknown customer or outlet,
                or no line items
            BackendError: the store rejected the write; the draft is kept
        """
        customer_id = customer_id or self.customer_id
        if not customer_id:
            raise ValidationError("Please select a customer")
        if not self._items:
            raise ValidationError("Please add at least one item to the order")

        total = self.compute_total()
        try:
            with get_session() as session:
                if session.get(Customer, customer_id) is None:
                    raise ValidationError(f"Unknown customer: {customer_id}")
                if self.outlet_id and session.get(Outlet, self.outlet_id) is None:
                    raise ValidationError(f"Unknown outlet: {self.outlet_id}")

                order = Order(
                    customer_id=customer_id,
                    outlet_id=self.outlet_id,
                    status=OrderStatus.PENDING.value,
                    total_amount=total,
                )
                session.add(order)
                session.flush()

                for position, item in enumerate(self._items):
                    session.add(
                        OrderItem(order_id=order.id, position=position, **item.persisted_fields())
                    )
                session.flush()

                stored = session.execute(
                    select(Order)
                    .where(Order.id == order.id)
                    .options(
                        joinedload(Order.items).joinedload(OrderItem.menu_item),
                        joinedload(Order.customer),
                    )
                    .execution_options(populate_existing=True)
                ).unique().scalar_one()
                record = order_record_from_model(stored)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to create order for customer {customer_id}: {exc}", exc_info=True)
            raise BackendError("Could not save the order, please try again") from exc

        logger.info(
            f"Created order {record.id} for customer {customer_id} "
            f"({len(record.items)} items, total {record.total_amount})"
        )
        orders_changed.send("order_draft", order_id=record.id)
        self.reset()
        return record
