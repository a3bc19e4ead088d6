"""
Domain logic around persisted orders: listing, status changes and deletion.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from orderly_shared.datetime_utils import utcnow
from orderly_shared.db import get_session
from orderly_shared.errors import BackendError, NotFoundError
from orderly_shared.logging_config import get_logger
from orderly_shared.models import Order, OrderItem
from orderly_shared.query_cache import orders_changed
from orderly_shared.schemas import OrderRecord, order_record_from_model
from orderly_shared.services.order_state_machine import order_state_machine
from orderly_shared.services.reporting_service import filter_by_date_and_search

logger = get_logger(__name__)


def _order_query():
    return select(Order).options(
        joinedload(Order.items).joinedload(OrderItem.menu_item),
        joinedload(Order.customer),
    )


def list_orders(
    outlet_id: str | None = None,
    day: date | None = None,
    query: str | None = None,
    limit: int | None = None,
) -> list[OrderRecord]:
    """
    Orders newest first, optionally scoped to an outlet.

    When ``day`` is given only orders created that calendar day are kept, further
    narrowed by ``query`` (order id, customer name, phone or table number). A
    ``query`` without a ``day`` searches today.
    """
    if query and day is None:
        day = utcnow().date()

    stmt = _order_query()
    if outlet_id:
        stmt = stmt.where(Order.outlet_id == outlet_id)
    stmt = stmt.order_by(Order.created_at.desc(), Order.id)

    with get_session() as session:
        orders = session.execute(stmt).unique().scalars().all()
        records = [order_record_from_model(order) for order in orders]

    if day is not None:
        records = filter_by_date_and_search(records, day, query)
    if limit is not None:
        records = records[:limit]

    logger.debug(f"Listed {len(records)} orders (outlet={outlet_id}, day={day})")
    return records


def get_order(order_id: str) -> OrderRecord:
    with get_session() as session:
        order = session.execute(_order_query().where(Order.id == order_id)).unique().scalar()
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order_record_from_model(order)


def _transition(order_id: str, target_status=None, advance: bool = False) -> OrderRecord:
    try:
        with get_session() as session:
            order = session.execute(_order_query().where(Order.id == order_id)).unique().scalar()
            if order is None:
                raise NotFoundError(f"Order {order_id} not found")

            previous = order.status
            if advance:
                new_status = order_state_machine.advance(order)
            else:
                new_status = order_state_machine.set_status(order, target_status)
            session.flush()
            record = order_record_from_model(order)
    except SQLAlchemyError as exc:
        logger.error(f"Failed to update status of order {order_id}: {exc}", exc_info=True)
        raise BackendError("Could not update the order status, please try again") from exc

    logger.info(f"Order {order_id} status {previous} -> {new_status.value}")
    orders_changed.send("order_service", order_id=order_id, status=new_status.value)
    return record


def set_status(order_id: str, target_status) -> OrderRecord:
    """
    Move an order to ``target_status``.

    Raises InvalidTransitionError unless the target is the immediate successor
    of the current status.
    """
    return _transition(order_id, target_status)


def advance_order(order_id: str) -> OrderRecord:
    """Move an order one step forward (pending -> ready -> paid)."""
    return _transition(order_id, advance=True)


def delete_order(order_id: str) -> None:
    """Hard delete an order together with its line items, whatever its status."""
    try:
        with get_session() as session:
            order = session.get(Order, order_id)
            if order is None:
                raise NotFoundError(f"Order {order_id} not found")
            session.delete(order)
    except SQLAlchemyError as exc:
        logger.error(f"Failed to delete order {order_id}: {exc}", exc_info=True)
        raise BackendError("Could not delete the order, please try again") from exc

    logger.info(f"Deleted order {order_id}")
    orders_changed.send("order_service", order_id=order_id, status=None)
