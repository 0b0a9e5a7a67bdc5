"""HTML fragments for the cart widget (counter, total, line items)."""
from __future__ import annotations

import html
from dataclasses import dataclass
from string import Formatter
from typing import Any

from cartfox.core.money import MoneyFormat
from cartfox.domain.cart import CartSnapshot, LineItem

EMPTY_CART_HTML = "<p>Your cart is empty!</p>"

DEFAULT_LINE_ITEM_TEMPLATE = (
    '<div class="item" data-item-id="{id}">'
    '<span class="item-title">{title}</span>'
    '<span class="item-qty" data-item-quantity data-item-id="{id}">{quantity}</span>'
    '<span class="item-price">{line_price_html}</span>'
    "</div>"
)

# Fields already rendered as markup; everything else is escaped.
_SAFE_FIELDS = {"price_html", "line_price_html"}


@dataclass(frozen=True, slots=True)
class RenderedCart:
    item_count: str
    total_html: str
    items_html: str


class _Markup(str):
    """Already-rendered markup that must not be escaped again."""


class _LineItemFormatter(Formatter):
    def get_field(self, field_name: str, args: Any, kwargs: Any) -> tuple[Any, str]:
        # "properties.Engraving" reads a key of the properties map.
        if field_name.startswith("properties."):
            value = kwargs.get("properties", {}).get(field_name.split(".", 1)[1], "")
        else:
            value = kwargs.get(field_name, "")
        if field_name in _SAFE_FIELDS:
            value = _Markup(value)
        return value, field_name

    def format_field(self, value: Any, format_spec: str) -> str:
        # Escape after formatting so numeric specs like {quantity:02d} still apply.
        if value is None:
            value = ""
        formatted = format(value, format_spec)
        if isinstance(value, _Markup):
            return formatted
        return html.escape(formatted)


class CartRenderer:
    """
    Turns a cart snapshot into markup.

    The money format is fixed at construction; nothing here reads global
    currency state. The last result stays available on ``view``.
    """

    def __init__(
        self,
        money_format: MoneyFormat | None = None,
        line_item_template: str | None = None,
    ) -> None:
        self.money_format = money_format or MoneyFormat()
        self.line_item_template = line_item_template or DEFAULT_LINE_ITEM_TEMPLATE
        self.view: RenderedCart | None = None
        self._formatter = _LineItemFormatter()

    def money_html(self, cents: int | None) -> str:
        return f'<span class="money">{html.escape(self.money_format.format(cents))}</span>'

    def render_line_item(self, item: LineItem) -> str:
        fields = item.to_dict()
        fields["price_html"] = self.money_html(item.price)
        fields["line_price_html"] = self.money_html(item.line_price)
        return self._formatter.vformat(self.line_item_template, (), fields)

    def render(self, snapshot: CartSnapshot) -> RenderedCart:
        if snapshot.items:
            items_html = "".join(self.render_line_item(item) for item in snapshot.items)
        else:
            items_html = EMPTY_CART_HTML

        self.view = RenderedCart(
            item_count=str(snapshot.item_count),
            total_html=self.money_html(snapshot.total_price),
            items_html=items_html,
        )
        return self.view


__all__ = ["CartRenderer", "DEFAULT_LINE_ITEM_TEMPLATE", "EMPTY_CART_HTML", "RenderedCart"]
