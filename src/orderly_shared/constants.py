"""
Application constants and enums.
"""

from decimal import Decimal
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    PAID = "paid"


# Forward-only lifecycle; each status maps to the single status it may move to.
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.PAID,
}

TERMINAL_ORDER_STATUSES = {OrderStatus.PAID}


MONEY_QUANTUM = Decimal("0.01")

BILL_ID_LENGTH = 8

DEFAULT_POINTS_PER_AMOUNT = 10
DEFAULT_AMOUNT_THRESHOLD = 100

DEFAULT_REPORT_WINDOW_DAYS = 30
RECENT_OUTLET_ORDERS_LIMIT = 5
MAX_REPORT_WINDOW_DAYS = 3650
