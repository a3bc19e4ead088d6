"""
Read-through cache for list queries, invalidated by change signals.

Services emit a signal after every committed write; a QueryCache connected to
those signals drops the namespaces the write can affect. Entries are keyed by
namespace plus the query parameters, and also expire after a TTL.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from datetime import datetime, timedelta
from typing import Any

from blinker import Namespace

from .datetime_utils import utcnow
from .logging_config import get_logger

logger = get_logger(__name__)

signals = Namespace()

menu_changed = signals.signal("menu-changed")
customers_changed = signals.signal("customers-changed")
orders_changed = signals.signal("orders-changed")
outlets_changed = signals.signal("outlets-changed")
loyalty_settings_changed = signals.signal("loyalty-settings-changed")

MENU_ITEMS = "menu_items"
CUSTOMERS = "customers"
ORDERS = "orders"
OUTLETS = "outlets"
OUTLET_ORDERS = "outlet_orders"
OUTLET_STATS = "outlet_stats"
REPORTS = "reports"
LOYALTY_SETTINGS = "loyalty_settings"

# Which cached namespaces each signal makes stale.
INVALIDATION_MAP = {
    menu_changed: (MENU_ITEMS, ORDERS, OUTLET_ORDERS),
    customers_changed: (CUSTOMERS, ORDERS, OUTLET_ORDERS),
    orders_changed: (ORDERS, OUTLET_ORDERS, OUTLET_STATS, REPORTS),
    outlets_changed: (OUTLETS,),
    loyalty_settings_changed: (LOYALTY_SETTINGS,),
}

DEFAULT_TTL = timedelta(minutes=5)


def _freeze(params: dict[str, Any] | None) -> Hashable:
    if not params:
        return ()
    return tuple(sorted((key, str(value)) for key, value in params.items()))


class QueryCache:
    """Per-application cache of query results."""

    def __init__(self, ttl: timedelta = DEFAULT_TTL):
        self.ttl = ttl
        self._entries: dict[tuple[str, Hashable], tuple[Any, datetime]] = {}
        # Bumped on every invalidation; a load that straddles one is not stored.
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()
        self._receivers: list[Callable] = []

    def get_or_load(
        self, namespace: str, params: dict[str, Any] | None, loader: Callable[[], Any]
    ) -> Any:
        key = (namespace, _freeze(params))
        with self._lock:
            cached = self._entries.get(key)
            if cached and utcnow() - cached[1] < self.ttl:
                return cached[0]
            started = self._generation(namespace)

        value = loader()
        with self._lock:
            if self._generation(namespace) == started:
                self._entries[key] = (value, utcnow())
            else:
                logger.debug(f"Discarded stale load for cache namespace {namespace}")
        return value

    def _generation(self, namespace: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(namespace, 0)

    def invalidate(self, *namespaces: str) -> None:
        with self._lock:
            if not namespaces:
                self._epoch += 1
                self._entries.clear()
                return
            for namespace in namespaces:
                self._generations[namespace] = self._generations.get(namespace, 0) + 1
            for key in [key for key in self._entries if key[0] in namespaces]:
                del self._entries[key]
        logger.debug(f"Invalidated cache namespaces: {', '.join(namespaces) or 'all'}")

    def __len__(self) -> int:
        return len(self._entries)

    def connect_signals(self) -> None:
        """Subscribe to every change signal in INVALIDATION_MAP."""
        for signal, namespaces in INVALIDATION_MAP.items():

            def receiver(sender, _namespaces=namespaces, **extra):
                self.invalidate(*_namespaces)

            # blinker keeps weak references by default; hold the closures here.
            self._receivers.append(receiver)
            signal.connect(receiver)

    def disconnect_signals(self) -> None:
        for signal in INVALIDATION_MAP:
            for receiver in self._receivers:
                signal.disconnect(receiver)
        self._receivers.clear()
