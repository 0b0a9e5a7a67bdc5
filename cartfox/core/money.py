"""Money formatting for cart totals (amounts arrive as integer cents)."""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .config import DEFAULT_MONEY_FORMAT

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")

# placeholder -> (precision, thousands separator, decimal separator)
_STYLES: dict[str, tuple[int, str, str]] = {
    "amount": (2, ",", "."),
    "amount_no_decimals": (0, ",", "."),
    "amount_with_comma_separator": (2, ".", ","),
    "amount_no_decimals_with_comma_separator": (0, ".", ","),
    "amount_with_apostrophe_separator": (2, "'", "."),
    "amount_with_space_separator": (2, " ", ","),
}


@dataclass(frozen=True, slots=True)
class MoneyFormat:
    """Currency display settings handed to the renderer."""

    template: str = DEFAULT_MONEY_FORMAT

    def format(self, cents: int | float | str | None) -> str:
        return format_money(cents, self.template)


def _to_cents(value: int | float | str | None) -> Decimal:
    if value is None or value == "":
        return Decimal(0)
    if isinstance(value, str):
        value = value.replace(".", "", 1)
    try:
        cents = Decimal(value)
    except InvalidOperation:
        return Decimal(0)
    # NaN and infinities format as zero.
    return cents if cents.is_finite() else Decimal(0)


def _with_delimiters(cents: Decimal, precision: int, thousands: str, decimal: str) -> str:
    quantum = Decimal(1).scaleb(-precision)
    amount = (cents / 100).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", thousands)
    return f"{sign}{grouped}{decimal + fraction if fraction else ''}"


def format_money(cents: int | float | str | None, template: str = DEFAULT_MONEY_FORMAT) -> str:
    """Render ``cents`` through a ``{{amount}}``-style template.

    Unknown placeholders are left untouched.
    """
    value = _to_cents(cents)

    def _replace(match: re.Match[str]) -> str:
        style = _STYLES.get(match.group(1))
        if style is None:
            return match.group(0)
        return _with_delimiters(value, *style)

    return _PLACEHOLDER.sub(_replace, template or DEFAULT_MONEY_FORMAT)


__all__ = ["MoneyFormat", "format_money"]
