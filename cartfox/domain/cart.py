"""Cart snapshot as last reported by the cart endpoints."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LineItem:
    """Single line in the cart."""

    id: int
    quantity: int
    price: int
    line_price: int
    properties: dict[str, Any] = field(default_factory=dict)
    title: str = ""
    variant_id: int | None = None
    product_id: int | None = None
    sku: str | None = None
    key: str | None = None
    url: str | None = None
    image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "quantity": self.quantity,
            "price": self.price,
            "line_price": self.line_price,
            "properties": dict(self.properties),
            "title": self.title,
            "variant_id": self.variant_id,
            "product_id": self.product_id,
            "sku": self.sku,
            "key": self.key,
            "url": self.url,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LineItem:
        quantity = int(data.get("quantity", 0) or 0)
        price = int(data.get("price", 0) or 0)
        return cls(
            id=int(data.get("id", 0) or 0),
            quantity=quantity,
            price=price,
            line_price=int(data.get("line_price", price * quantity) or 0),
            # The cart sends null for items added without properties.
            properties=dict(data.get("properties") or {}),
            title=str(data.get("title", "") or ""),
            variant_id=data.get("variant_id"),
            product_id=data.get("product_id"),
            sku=data.get("sku"),
            key=data.get("key"),
            url=data.get("url"),
            image=data.get("image"),
        )


@dataclass
class CartSnapshot:
    """Read-mostly copy of the remote cart.

    Replaced wholesale on every refresh, never patched locally.
    """

    item_count: int = 0
    total_price: int = 0
    items: list[LineItem] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)
    note: str | None = None
    token: str | None = None
    currency: str | None = None
    original_total_price: int | None = None
    total_discount: int | None = None
    total_weight: float | None = None
    requires_shipping: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: int) -> LineItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "note": self.note,
            "attributes": dict(self.attributes),
            "item_count": self.item_count,
            "total_price": self.total_price,
            "original_total_price": self.original_total_price,
            "total_discount": self.total_discount,
            "total_weight": self.total_weight,
            "requires_shipping": self.requires_shipping,
            "currency": self.currency,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> CartSnapshot:
        if not data:
            return cls()
        items = [LineItem.from_dict(item) for item in data.get("items") or []]
        return cls(
            item_count=int(data.get("item_count", sum(i.quantity for i in items)) or 0),
            total_price=int(data.get("total_price", 0) or 0),
            items=items,
            attributes=dict(data.get("attributes") or {}),
            note=data.get("note"),
            token=data.get("token"),
            currency=data.get("currency"),
            original_total_price=data.get("original_total_price"),
            total_discount=data.get("total_discount"),
            total_weight=data.get("total_weight"),
            requires_shipping=bool(data.get("requires_shipping", False)),
            raw=dict(data),
        )


__all__ = ["CartSnapshot", "LineItem"]
