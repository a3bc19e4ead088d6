"""
Order State Machine - keeps status transition rules out of the Order model.

Orders only ever move forward, one step at a time:

    pending -> ready -> paid

``paid`` is terminal.
"""

from __future__ import annotations

from orderly_shared.constants import ORDER_TRANSITIONS, TERMINAL_ORDER_STATUSES, OrderStatus
from orderly_shared.datetime_utils import utcnow


class InvalidTransitionError(Exception):
    """Error raised when a state transition is invalid."""

    def __init__(
        self, message: str, current_status: OrderStatus | None, target_status: OrderStatus | None
    ):
        super().__init__(message)
        self.current_status = current_status
        self.target_status = target_status


def _coerce(status) -> OrderStatus:
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status)
    except ValueError:
        raise InvalidTransitionError(f"Unknown order status: {status!r}", None, None)


class OrderStateMachine:
    """
    Validates and applies order status transitions.

    Works on anything with a ``status`` attribute (ORM orders and records alike).
    """

    def next_status(self, status) -> OrderStatus | None:
        """Immediate successor of ``status``, or None when it is terminal."""
        return ORDER_TRANSITIONS.get(_coerce(status))

    def is_terminal(self, status) -> bool:
        return _coerce(status) in TERMINAL_ORDER_STATUSES

    def can_transition(self, current_status, target_status) -> bool:
        try:
            current = _coerce(current_status)
            target = _coerce(target_status)
        except InvalidTransitionError:
            return False
        return ORDER_TRANSITIONS.get(current) == target

    def validate_transition(self, current_status, target_status) -> OrderStatus:
        """Return the target as an enum, or raise InvalidTransitionError."""
        current = _coerce(current_status)
        target = _coerce(target_status)

        if current in TERMINAL_ORDER_STATUSES:
            raise InvalidTransitionError(
                f"Order is already {current.value}; no further transitions", current, target
            )
        if ORDER_TRANSITIONS.get(current) != target:
            raise InvalidTransitionError(
                f"Invalid transition: {current.value} -> {target.value}", current, target
            )
        return target

    def set_status(self, order, target_status) -> OrderStatus:
        """Move ``order`` to ``target_status`` if it is the immediate successor."""
        target = self.validate_transition(order.status, target_status)
        order.status = target.value
        if hasattr(order, "updated_at"):
            order.updated_at = utcnow()
        return target

    def advance(self, order) -> OrderStatus:
        """Move ``order`` to its immediate successor."""
        current = _coerce(order.status)
        target = self.next_status(current)
        if target is None:
            raise InvalidTransitionError(
                f"Order is already {current.value}; no further transitions", current, None
            )
        return self.set_status(order, target)


order_state_machine = OrderStateMachine()
