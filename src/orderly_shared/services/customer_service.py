"""
Customer records, free-text search and loyalty point corrections.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, select

from orderly_shared.db import get_session
from orderly_shared.errors import NotFoundError
from orderly_shared.logging_config import get_logger
from orderly_shared.models import Customer, Order
from orderly_shared.query_cache import customers_changed
from orderly_shared.schemas import CustomerPayload, CustomerRecord, parse_payload
from orderly_shared.validation import ValidationError

logger = get_logger(__name__)

SEARCH_FIELDS = ("name", "phone", "email", "table_number")


def display_label(customer) -> str:
    """Customer name, or "Table <n>" for walk-ins recorded by table only."""
    if customer is None:
        return ""
    if customer.name:
        return customer.name
    return f"Table {customer.table_number or ''}".strip()


def search(customers: Sequence[CustomerRecord], query: str | None) -> list[CustomerRecord]:
    """
    Case-insensitive substring match across name, phone, email and table number.

    An empty query returns every customer in the original order.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(customers)

    matches = []
    for customer in customers:
        for field in SEARCH_FIELDS:
            value = getattr(customer, field, None)
            if value and needle in str(value).lower():
                matches.append(customer)
                break
    return matches


def list_customers() -> list[CustomerRecord]:
    """All customers, newest first."""
    with get_session() as session:
        customers = (
            session.execute(select(Customer).order_by(Customer.created_at.desc()))
            .scalars()
            .all()
        )
        return [CustomerRecord.model_validate(customer) for customer in customers]


def get_customer(customer_id: str) -> CustomerRecord:
    with get_session() as session:
        customer = session.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found")
        return CustomerRecord.model_validate(customer)


def upsert_customer(payload: dict[str, Any], customer_id: str | None = None) -> CustomerRecord:
    """
    Create a customer, or replace the fields of an existing one.

    Only the shape of the record is checked; no field is mandatory.
    """
    data = parse_payload(CustomerPayload, payload)

    with get_session() as session:
        if customer_id is None:
            customer = Customer()
            session.add(customer)
        else:
            customer = session.get(Customer, customer_id)
            if customer is None:
                raise NotFoundError(f"Customer {customer_id} not found")

        customer.name = data.name
        customer.phone = data.phone
        customer.table_number = data.table_number
        customer.email = data.email
        if customer_id is None or "loyalty_points" in (payload or {}):
            customer.loyalty_points = data.loyalty_points
        session.flush()
        record = CustomerRecord.model_validate(customer)

    logger.info(f"{'Created' if customer_id is None else 'Updated'} customer {record.id}")
    customers_changed.send("customer_service", customer_id=record.id)
    return record


def delete_customer(customer_id: str) -> None:
    with get_session() as session:
        customer = session.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found")

        order_count = session.scalar(
            select(func.count(Order.id)).where(Order.customer_id == customer_id)
        )
        if order_count:
            raise ValidationError("Customer has orders and cannot be deleted")

        session.delete(customer)

    logger.info(f"Deleted customer {customer_id}")
    customers_changed.send("customer_service", customer_id=customer_id)


def adjust_loyalty_points(customer_id: str, delta: int) -> CustomerRecord:
    """Apply a manual correction to a customer's loyalty balance."""
    with get_session() as session:
        customer = session.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found")

        balance = (customer.loyalty_points or 0) + delta
        if balance < 0:
            raise ValidationError("Loyalty points cannot go below zero")

        customer.loyalty_points = balance
        session.flush()
        record = CustomerRecord.model_validate(customer)

    logger.info(f"Adjusted loyalty points for customer {customer_id} by {delta}")
    customers_changed.send("customer_service", customer_id=customer_id)
    return record
