"""
Reporting Service - revenue aggregation and order filters.

The aggregation and filter functions are pure: they take order records and
return plain rows, so they can run over orders already loaded for a screen.
``load_orders`` and the ``*_report`` helpers read the store and feed them.

Revenue only ever counts paid orders.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from orderly_shared.constants import OrderStatus
from orderly_shared.datetime_utils import utcnow
from orderly_shared.db import get_session
from orderly_shared.logging_config import get_logger
from orderly_shared.models import Order, OrderItem
from orderly_shared.schemas import OrderRecord, order_record_from_model

logger = get_logger(__name__)

ZERO = Decimal("0.00")


def _is_paid(order) -> bool:
    return OrderStatus(order.status) == OrderStatus.PAID


def _day_of(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def aggregate_by_day(
    orders: Iterable[OrderRecord], window_days: int, today: date | None = None
) -> list[dict[str, Any]]:
    """
    Revenue per day over the trailing ``window_days`` calendar days.

    Every day of the window gets a row, including days without orders, in
    ascending date order. ``today`` closes the window and defaults to the
    current UTC date.
    """
    if window_days < 1:
        raise ValueError("window_days must be at least 1")

    end = _day_of(today) if today is not None else utcnow().date()
    start = end - timedelta(days=window_days - 1)

    revenue: dict[date, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[date, int] = defaultdict(int)
    for order in orders:
        if not _is_paid(order):
            continue
        day = order.created_at.date()
        if start <= day <= end:
            revenue[day] += Decimal(order.total_amount)
            counts[day] += 1

    return [
        {
            "date": start + timedelta(days=offset),
            "total_revenue": revenue[start + timedelta(days=offset)],
            "order_count": counts[start + timedelta(days=offset)],
        }
        for offset in range(window_days)
    ]


def aggregate_by_month(orders: Iterable[OrderRecord]) -> list[dict[str, Any]]:
    """Paid revenue grouped by calendar month of creation, ascending."""
    revenue: dict[date, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[date, int] = defaultdict(int)
    for order in orders:
        if not _is_paid(order):
            continue
        month = order.created_at.date().replace(day=1)
        revenue[month] += Decimal(order.total_amount)
        counts[month] += 1

    return [
        {"month": month, "total_revenue": revenue[month], "order_count": counts[month]}
        for month in sorted(revenue)
    ]


def filter_by_outlet(orders: Iterable[OrderRecord], outlet_id: str | None) -> list[OrderRecord]:
    return [order for order in orders if order.outlet_id == outlet_id]


def _matches_query(order: OrderRecord, needle: str) -> bool:
    customer = order.customer
    candidates = [order.id]
    if customer is not None:
        candidates.extend([customer.name, customer.phone, customer.table_number])
    return any(value and needle in str(value).lower() for value in candidates)


def filter_by_date_and_search(
    orders: Iterable[OrderRecord], day: date | datetime, query: str | None = None
) -> list[OrderRecord]:
    """
    Orders created on the calendar day of ``day`` whose id, customer name,
    phone or table number contains ``query`` (case-insensitive).
    """
    target = _day_of(day)
    needle = (query or "").strip().lower()
    return [
        order
        for order in orders
        if order.created_at.date() == target and (not needle or _matches_query(order, needle))
    ]


def daily_summary(orders: Sequence[OrderRecord]) -> dict[str, Any]:
    """Order count and paid revenue for an already filtered set of orders."""
    return {
        "total_orders": len(orders),
        "total_revenue": sum(
            (Decimal(order.total_amount) for order in orders if _is_paid(order)), ZERO
        ),
    }


def load_orders(
    outlet_id: str | None = None,
    since: date | None = None,
    paid_only: bool = False,
) -> list[OrderRecord]:
    """Orders from the store, oldest first, narrowed in SQL where possible."""
    stmt = select(Order).options(
        joinedload(Order.items).joinedload(OrderItem.menu_item),
        joinedload(Order.customer),
    )
    if outlet_id:
        stmt = stmt.where(Order.outlet_id == outlet_id)
    if since is not None:
        stmt = stmt.where(Order.created_at >= datetime.combine(since, datetime.min.time()))
    if paid_only:
        stmt = stmt.where(Order.status == OrderStatus.PAID.value)
    stmt = stmt.order_by(Order.created_at)

    with get_session() as session:
        orders = session.execute(stmt).unique().scalars().all()
        return [order_record_from_model(order) for order in orders]


def daily_revenue_report(
    window_days: int, outlet_id: str | None = None, today: date | None = None
) -> list[dict[str, Any]]:
    end = today or utcnow().date()
    orders = load_orders(
        outlet_id=outlet_id, since=end - timedelta(days=window_days - 1), paid_only=True
    )
    logger.debug(f"Daily revenue report over {len(orders)} paid orders")
    return aggregate_by_day(orders, window_days, today=end)


def monthly_revenue_report(outlet_id: str | None = None) -> list[dict[str, Any]]:
    return aggregate_by_month(load_orders(outlet_id=outlet_id, paid_only=True))
