"""
Outlets and their per-outlet views of orders and revenue.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import select

from orderly_shared.constants import DEFAULT_REPORT_WINDOW_DAYS, RECENT_OUTLET_ORDERS_LIMIT
from orderly_shared.datetime_utils import utcnow
from orderly_shared.db import get_session
from orderly_shared.errors import NotFoundError
from orderly_shared.logging_config import get_logger
from orderly_shared.models import Outlet
from orderly_shared.query_cache import outlets_changed
from orderly_shared.schemas import OrderRecord, OutletCreate, OutletRecord, parse_payload
from orderly_shared.services.order_service import list_orders
from orderly_shared.services.reporting_service import aggregate_by_day, load_orders

logger = get_logger(__name__)


def list_outlets() -> list[OutletRecord]:
    """All outlets, newest first."""
    with get_session() as session:
        outlets = (
            session.execute(select(Outlet).order_by(Outlet.created_at.desc())).scalars().all()
        )
        return [OutletRecord.model_validate(outlet) for outlet in outlets]


def get_outlet(outlet_id: str) -> OutletRecord:
    with get_session() as session:
        outlet = session.get(Outlet, outlet_id)
        if outlet is None:
            raise NotFoundError(f"Outlet {outlet_id} not found")
        return OutletRecord.model_validate(outlet)


def create_outlet(payload: dict[str, Any]) -> OutletRecord:
    data = parse_payload(OutletCreate, payload)

    with get_session() as session:
        outlet = Outlet(
            name=data.name, address=data.address, phone=data.phone, admin_id=data.admin_id
        )
        session.add(outlet)
        session.flush()
        record = OutletRecord.model_validate(outlet)

    logger.info(f"Created outlet {record.id} ({record.name})")
    outlets_changed.send("outlet_service", outlet_id=record.id)
    return record


def recent_outlet_orders(
    outlet_id: str, limit: int = RECENT_OUTLET_ORDERS_LIMIT
) -> list[OrderRecord]:
    """Latest orders placed at an outlet, newest first."""
    get_outlet(outlet_id)
    return list_orders(outlet_id=outlet_id, limit=limit)


def outlet_statistics(
    outlet_id: str, days: int = DEFAULT_REPORT_WINDOW_DAYS, today: date | None = None
) -> dict[str, Any]:
    """
    Paid revenue per day for one outlet over the trailing ``days`` days, plus
    the window totals.
    """
    get_outlet(outlet_id)
    end = today or utcnow().date()
    orders = load_orders(
        outlet_id=outlet_id, since=end - timedelta(days=days - 1), paid_only=True
    )
    daily = aggregate_by_day(orders, days, today=end)
    return {
        "outlet_id": outlet_id,
        "days": daily,
        "total_orders": sum(row["order_count"] for row in daily),
        "total_revenue": sum((row["total_revenue"] for row in daily), Decimal("0.00")),
    }
