"""Typed UI actions for the cart widget and the registry that routes them."""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from cartfox.core.exceptions import InvalidInputException
from cartfox.services.cart_service import CartService
from logging_config import logger


@dataclass(frozen=True, slots=True)
class AddToCart:
    """Product form submitted."""

    variant_id: int | str | None
    quantity: int = 1
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class QuickAdd:
    """One-click add button (collection grids, upsells)."""

    variant_id: int | str | None
    quantity: int = 1
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IncreaseQuantity:
    item_id: int
    current_quantity: int


@dataclass(frozen=True, slots=True)
class DecreaseQuantity:
    item_id: int
    current_quantity: int


@dataclass(frozen=True, slots=True)
class RemoveLine:
    item_id: int


E = TypeVar("E")
ActionHandler = Callable[[Any], Any]


class CartActions:
    """Explicit action-type -> handler registry."""

    def __init__(self) -> None:
        self._handlers: dict[type, ActionHandler] = {}

    def register(self, action_type: type[E], handler: Callable[[E], Any]) -> None:
        if action_type in self._handlers:
            logger.debug(f"Replacing handler for {action_type.__name__}")
        self._handlers[action_type] = handler

    def is_registered(self, action_type: type) -> bool:
        return action_type in self._handlers

    def dispatch(self, action: object) -> Any:
        handler = self._handlers.get(type(action))
        if handler is None:
            raise InvalidInputException(f"No handler registered for {type(action).__name__}")
        return handler(action)

    @classmethod
    def for_service(cls, service: CartService) -> CartActions:
        """Registry wired to the default cart behaviour."""
        actions = cls()

        def add(action: AddToCart) -> bool:
            return service.add_item(action.variant_id, action.quantity, action.properties)

        def quick_add(action: QuickAdd) -> bool:
            quantity = action.quantity if action.quantity and action.quantity > 0 else 1
            return service.add_item(action.variant_id, quantity, action.properties)

        def increase(action: IncreaseQuantity) -> Any:
            return service.update_item_by_id(action.item_id, action.current_quantity + 1)

        def decrease(action: DecreaseQuantity) -> Any:
            return service.update_item_by_id(action.item_id, action.current_quantity - 1)

        def remove(action: RemoveLine) -> Any:
            return service.remove_by_id(action.item_id)

        actions.register(AddToCart, add)
        actions.register(QuickAdd, quick_add)
        actions.register(IncreaseQuantity, increase)
        actions.register(DecreaseQuantity, decrease)
        actions.register(RemoveLine, remove)
        return actions


__all__ = [
    "AddToCart",
    "CartActions",
    "DecreaseQuantity",
    "IncreaseQuantity",
    "QuickAdd",
    "RemoveLine",
]
