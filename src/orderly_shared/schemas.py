"""
Pydantic schemas for request validation and for records leaving the store.

Request schemas validate incoming payloads. Record schemas are the typed
entities built from ORM rows; a row that does not fit its record schema is
rejected at this boundary instead of leaking half-filled fields further in.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .constants import OrderStatus
from .validation import ValidationError, validate_email


def parse_payload(schema: type[BaseModel], payload: dict[str, Any] | None) -> BaseModel:
    """Validate ``payload`` against ``schema`` and raise ValidationError on failure."""
    try:
        return schema.model_validate(payload or {})
    except PydanticValidationError as exc:
        messages = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()))
            messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        raise ValidationError("; ".join(messages)) from exc


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# ==================== REQUESTS ====================


class MenuItemCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: str | None = None
    photo_url: str | None = Field(None, max_length=500)

    @field_validator("description", "photo_url", mode="before")
    @classmethod
    def normalize_optional(cls, v):
        return _blank_to_none(v)


class MenuItemUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=120)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: str | None = None
    photo_url: str | None = Field(None, max_length=500)


class CustomerPayload(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=40)
    table_number: str | None = Field(None, max_length=20)
    email: str | None = Field(None, max_length=255)
    loyalty_points: int = Field(default=0, ge=0)

    @field_validator("name", "phone", "table_number", "email", mode="before")
    @classmethod
    def normalize_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        if v is not None:
            validate_email(v)
            return v.lower()
        return v


class LoyaltyAdjustment(BaseModel):
    delta: int


class OrderItemRequest(BaseModel):
    menu_item_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1)


class CreateOrderRequest(BaseModel):
    customer_id: str | None = None
    outlet_id: str | None = None
    items: list[OrderItemRequest] = Field(default_factory=list)


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class OutletCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    address: str | None = None
    phone: str | None = Field(None, max_length=40)
    admin_id: str | None = None

    @field_validator("address", "phone", "admin_id", mode="before")
    @classmethod
    def normalize_optional(cls, v):
        return _blank_to_none(v)


class LoyaltySettingsUpdate(BaseModel):
    points_per_amount: int = Field(..., gt=0)
    amount_threshold: int = Field(..., gt=0)


# ==================== RECORDS ====================


class MenuItemRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    description: str | None = None
    photo_url: str | None = None
    created_at: datetime | None = None


class CustomerRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    phone: str | None = None
    table_number: str | None = None
    email: str | None = None
    loyalty_points: int = Field(default=0, ge=0)
    created_at: datetime | None = None


class LineItemRecord(BaseModel):
    id: str | None = None
    menu_item_id: str
    menu_item_name: str | None = None
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price


class OrderRecord(BaseModel):
    id: str
    customer_id: str
    outlet_id: str | None = None
    status: OrderStatus
    total_amount: Decimal = Field(..., ge=0)
    created_at: datetime
    customer: CustomerRecord | None = None
    items: list[LineItemRecord] = Field(default_factory=list)


class OutletRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = Field(..., min_length=1)
    address: str | None = None
    phone: str | None = None
    admin_id: str | None = None
    created_at: datetime | None = None


class LoyaltySettingsRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    points_per_amount: int = Field(..., gt=0)
    amount_threshold: int = Field(..., gt=0)


def order_record_from_model(order) -> OrderRecord:
    """Build an OrderRecord from an ORM Order with its customer and items loaded."""
    return OrderRecord(
        id=order.id,
        customer_id=order.customer_id,
        outlet_id=order.outlet_id,
        status=order.status,
        total_amount=order.total_amount,
        created_at=order.created_at,
        customer=CustomerRecord.model_validate(order.customer) if order.customer else None,
        items=[
            LineItemRecord(
                id=item.id,
                menu_item_id=item.menu_item_id,
                menu_item_name=item.menu_item.name if item.menu_item else None,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
    )
