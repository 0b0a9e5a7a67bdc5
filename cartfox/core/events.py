"""
In-process notification bus for cart events.

Delivery is synchronous and fire-and-forget: ``publish`` calls every
subscriber in subscription order and ignores return values. A failing
subscriber is logged and does not affect the others.
"""
from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from logging_config import logger


class CartEvent(str, Enum):
    """Names of the events published by the queue and the cart service."""

    QUEUE_STARTED = "queue-started"
    QUEUE_DRAINED = "queue-drained"
    REQUEST_FAILED = "request-failed"
    ITEM_REJECTED = "item-rejected"
    ITEM_ADDED = "item-added"
    CART_UPDATED = "cart-updated"


EventHandler = Callable[[CartEvent, Any], None]


class EventBus:
    """Synchronous publish/subscribe keyed by :class:`CartEvent`."""

    def __init__(self) -> None:
        self._subscribers: dict[CartEvent, list[EventHandler]] = {}

    def subscribe(self, event: CartEvent | str, handler: EventHandler) -> None:
        """Subscribe ``handler`` to ``event``; duplicate subscriptions are ignored."""
        key = CartEvent(event)
        handlers = self._subscribers.setdefault(key, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Subscribed to {key.value}, total: {len(handlers)}")

    def unsubscribe(self, event: CartEvent | str, handler: EventHandler) -> None:
        key = CartEvent(event)
        handlers = self._subscribers.get(key)
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self._subscribers[key]

    def publish(self, event: CartEvent | str, payload: Any = None) -> None:
        key = CartEvent(event)
        for handler in list(self._subscribers.get(key, ())):
            try:
                handler(key, payload)
            except Exception:
                logger.exception(f"Handler error for event {key.value}")

    def subscriber_count(self, event: CartEvent | str) -> int:
        return len(self._subscribers.get(CartEvent(event), ()))

    def clear(self) -> None:
        self._subscribers.clear()


__all__ = ["CartEvent", "EventBus", "EventHandler"]
