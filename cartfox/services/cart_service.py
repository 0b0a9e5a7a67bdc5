"""
Cart service: intent-level cart operations on top of the request queue.

Every mutation is queued and immediately followed by a refresh of
``/cart.js``. The cached snapshot is only ever replaced from a server
response, never patched in anticipation of one.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cartfox.core.events import CartEvent
from cartfox.core.request_queue import Callback, RequestDescriptor, RequestQueue
from cartfox.domain.cart import CartSnapshot, LineItem
from cartfox.templates.cart import CartRenderer
from logging_config import logger

CART_PATH = "/cart.js"
ADD_PATH = "/cart/add.js"
CHANGE_PATH = "/cart/change.js"
UPDATE_PATH = "/cart/update.js"
CLEAR_PATH = "/cart/clear.js"


class CartService:
    """Owns the cart snapshot and turns user intents into queued requests.

    Example:
    ```python
    service = CartService(RequestQueue(transport), CartRenderer())
    service.add_item(7, quantity=2)
    await service.join()
    print(service.snapshot.item_count)
    ```
    """

    def __init__(
        self,
        queue: RequestQueue,
        renderer: CartRenderer | None = None,
        initial: CartSnapshot | Mapping[str, Any] | None = None,
        render_on_update: bool = True,
    ) -> None:
        self.queue = queue
        self.bus = queue.bus
        self.renderer = renderer
        self.render_on_update = render_on_update
        if isinstance(initial, CartSnapshot):
            self._snapshot = initial
        else:
            self._snapshot = CartSnapshot.from_dict(dict(initial) if initial else None)

    @property
    def snapshot(self) -> CartSnapshot:
        return self._snapshot

    @staticmethod
    def wrap_keys(
        mapping: Mapping[str, Any],
        namespace: str | None = None,
        default: Any = None,
    ) -> dict[str, Any]:
        """Copy ``mapping`` with keys rewritten as ``namespace[key]``.

        ``default`` replaces every value when given (used to blank attributes).
        """
        wrapped: dict[str, Any] = {}
        for key, value in mapping.items():
            name = f"{namespace}[{key}]" if namespace else str(key)
            wrapped[name] = value if default is None else default
        return wrapped

    async def join(self) -> None:
        """Wait for every queued cart request to finish."""
        await self.queue.join()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def refresh(self, handler: Callback | None = None) -> RequestDescriptor:
        """Queue a fetch of the whole cart."""
        return self.queue.enqueue(CART_PATH, {}, method="GET", success=handler or self.update_snapshot)

    def get_attribute(self, name: str, default: Any = False) -> Any:
        return self._snapshot.attributes.get(name, default)

    def get_attributes(self) -> dict[str, Any]:
        return dict(self._snapshot.attributes)

    def get_note(self) -> str | None:
        return self._snapshot.note

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(
        self,
        variant_id: int | str | None,
        quantity: int = 1,
        properties: Mapping[str, Any] | None = None,
    ) -> bool:
        """
        Add a variant to the cart.

        Args:
            variant_id: Variant to add; ``None`` is refused without queueing
            quantity: Raised to 1 when lower
            properties: Custom line item properties, sent only when non-empty

        Returns:
            False when nothing was queued
        """
        if variant_id is None:
            return False

        data: dict[str, Any] = {"id": variant_id, "quantity": max(int(quantity or 1), 1)}
        if properties:
            data["properties"] = self.wrap_keys(properties)

        self.queue.enqueue(ADD_PATH, data, success=self._item_added)
        self.refresh()
        return True

    def remove_item(self, line: int) -> RequestDescriptor:
        """Remove the cart line at 1-based position ``line``."""
        self.queue.enqueue(CHANGE_PATH, {"line": line, "quantity": 0})
        return self.refresh()

    def remove_by_id(self, item_id: int | str) -> RequestDescriptor:
        self.queue.enqueue(UPDATE_PATH, {"updates": {item_id: 0}})
        return self.refresh()

    def update_item_by_id(self, item_id: int | str, quantity: int) -> RequestDescriptor:
        """Set the quantity of one item; 0 (or less) removes it."""
        self.queue.enqueue(
            UPDATE_PATH,
            {"updates": {item_id: max(int(quantity), 0)}},
            success=self.update_snapshot,
        )
        return self.refresh()

    def update_items_by_id(
        self,
        items: Mapping[int | str, int] | None,
        *,
        success: Callback | None = None,
        error: Callback | None = None,
    ) -> RequestDescriptor:
        """Set several quantities in one request. An empty mapping only refreshes."""
        if items:
            self.queue.enqueue(UPDATE_PATH, {"updates": dict(items)}, success=success, error=error)
        return self.refresh()

    def set_attribute(
        self,
        name: str,
        value: Any,
        *,
        success: Callback | None = None,
        error: Callback | None = None,
    ) -> RequestDescriptor:
        return self.set_attributes({name: value}, success=success, error=error)

    def set_attributes(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        success: Callback | None = None,
        error: Callback | None = None,
    ) -> RequestDescriptor:
        """Merge ``attributes`` into the cart's attributes.

        Keys go out as ``attributes[name]`` so the cart merges them instead of
        replacing the whole set. An empty mapping only refreshes.
        """
        if attributes:
            self.queue.enqueue(
                UPDATE_PATH,
                self.wrap_keys(attributes, "attributes"),
                success=success,
                error=error,
            )
        return self.refresh()

    def clear_attributes(self) -> RequestDescriptor:
        """Blank every attribute currently known from the snapshot."""
        attributes = self._snapshot.attributes
        if attributes:
            self.queue.enqueue(UPDATE_PATH, self.wrap_keys(attributes, "attributes", ""))
        return self.refresh()

    def set_note(
        self,
        note: str,
        *,
        success: Callback | None = None,
        error: Callback | None = None,
    ) -> RequestDescriptor:
        self.queue.enqueue(UPDATE_PATH, {"note": note}, success=success, error=error)
        return self.refresh()

    def clear(self) -> RequestDescriptor:
        self.queue.enqueue(CLEAR_PATH, {})
        return self.refresh()

    # ------------------------------------------------------------------
    # Response handling
    # ------------------------------------------------------------------

    def update_snapshot(
        self,
        cart: CartSnapshot | Mapping[str, Any] | None,
        apply_presentation: bool | None = None,
    ) -> CartSnapshot:
        """Replace the cached snapshot with a server response.

        Renders through the renderer when ``apply_presentation`` (default:
        ``render_on_update``) is true, and always publishes ``cart-updated``.
        """
        if isinstance(cart, CartSnapshot):
            snapshot = cart
        else:
            snapshot = CartSnapshot.from_dict(dict(cart) if cart else None)
        self._snapshot = snapshot
        logger.info(f"Cart updated: {snapshot.item_count} items, total {snapshot.total_price}")

        if apply_presentation is None:
            apply_presentation = self.render_on_update
        if apply_presentation and self.renderer is not None:
            try:
                self.renderer.render(snapshot)
            except Exception:
                logger.exception("Cart render failed; snapshot kept")

        self.bus.publish(CartEvent.CART_UPDATED, snapshot)
        return snapshot

    def _item_added(self, body: Any) -> None:
        item = LineItem.from_dict(body) if isinstance(body, Mapping) else body
        self.bus.publish(CartEvent.ITEM_ADDED, item)


__all__ = [
    "ADD_PATH",
    "CART_PATH",
    "CHANGE_PATH",
    "CLEAR_PATH",
    "UPDATE_PATH",
    "CartService",
]
