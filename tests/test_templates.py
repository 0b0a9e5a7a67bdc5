"""Tests for money formatting and cart markup rendering."""
from __future__ import annotations

import pytest

from cartfox.core.money import MoneyFormat, format_money
from cartfox.domain.cart import CartSnapshot
from cartfox.templates.cart import EMPTY_CART_HTML, CartRenderer
from tests.factories import make_cart, make_item


class TestFormatMoney:
    @pytest.mark.parametrize(
        ("template", "cents", "expected"),
        [
            ("{{amount}}", 123456, "1,234.56"),
            ("${{ amount }}", 500, "$5.00"),
            ("{{amount_no_decimals}}", 123456, "1,235"),
            ("{{amount_with_comma_separator}} €", 123456, "1.234,56 €"),
            ("{{amount_no_decimals_with_comma_separator}}", 123456, "1.235"),
            ("{{amount_with_apostrophe_separator}} CHF", 123456, "1'234.56 CHF"),
            ("{{amount_with_space_separator}} zł", 123456, "1 234,56 zł"),
            ("{{amount}}", 99999999, "999,999.99"),
        ],
    )
    def test_templates(self, template, cents, expected):
        assert format_money(cents, template) == expected

    def test_default_template(self):
        assert format_money(1999) == "19.99"

    def test_none_and_empty_are_zero(self):
        assert format_money(None) == "0.00"
        assert format_money("") == "0.00"

    def test_string_cents_with_dot(self):
        assert format_money("10.00") == "10.00"
        assert format_money("2500") == "25.00"

    def test_negative(self):
        assert format_money(-150) == "-1.50"

    @pytest.mark.parametrize("cents", ["nan", "inf", "-Infinity", float("nan"), float("inf")])
    def test_non_finite_amounts_are_zero(self, cents):
        assert format_money(cents) == "0.00"
        assert format_money(cents, "{{amount_no_decimals}}") == "0"

    def test_only_first_dot_is_stripped(self):
        # "1.2.3" reads as 12.3 cents
        assert format_money("1.2.3") == "0.12"

    def test_unknown_placeholder_left_alone(self):
        assert format_money(100, "{{amount}} {{currency}}") == "1.00 {{currency}}"

    def test_money_format_object(self):
        euro = MoneyFormat("€{{amount_with_comma_separator}}")
        assert euro.format(1050) == "€10,50"
        assert MoneyFormat().template == "{{amount}}"


class TestCartRenderer:
    def test_empty_cart(self):
        renderer = CartRenderer()
        view = renderer.render(CartSnapshot())

        assert view.item_count == "0"
        assert view.total_html == '<span class="money">0.00</span>'
        assert view.items_html == EMPTY_CART_HTML
        assert renderer.view is view

    def test_default_line_item_template(self):
        renderer = CartRenderer()
        snapshot = CartSnapshot.from_dict(make_cart(make_item(1, 2, price=1250, title="Mug")))

        view = renderer.render(snapshot)

        assert view.item_count == "2"
        assert view.total_html == '<span class="money">25.00</span>'
        assert view.items_html == (
            '<div class="item" data-item-id="1">'
            '<span class="item-title">Mug</span>'
            '<span class="item-qty" data-item-quantity data-item-id="1">2</span>'
            '<span class="item-price"><span class="money">25.00</span></span>'
            "</div>"
        )

    def test_values_are_escaped(self):
        renderer = CartRenderer(line_item_template="{title}")
        snapshot = CartSnapshot.from_dict(make_cart(make_item(1, 1, title="<b>Mug</b> & co")))

        assert renderer.render(snapshot).items_html == "&lt;b&gt;Mug&lt;/b&gt; &amp; co"

    def test_custom_template_with_properties_and_money_format(self):
        renderer = CartRenderer(
            MoneyFormat("${{amount}}"),
            line_item_template="{title}|{quantity}|{price_html}|{properties.Engraving}|{missing};",
        )
        snapshot = CartSnapshot.from_dict(
            make_cart(
                make_item(1, 1, price=500, title="Pen", properties={"Engraving": "Ann"}),
                make_item(2, 3, price=100, title="Ink"),
            )
        )

        view = renderer.render(snapshot)

        assert view.items_html == (
            'Pen|1|<span class="money">$5.00</span>|Ann|;'
            'Ink|3|<span class="money">$1.00</span>||;'
        )
        assert view.total_html == '<span class="money">$8.00</span>'

    def test_render_replaces_previous_view(self):
        renderer = CartRenderer()
        renderer.render(CartSnapshot.from_dict(make_cart(make_item(1, 1))))
        second = renderer.render(CartSnapshot())

        assert renderer.view is second
        assert second.items_html == EMPTY_CART_HTML

    def test_numeric_format_specs_apply_before_escaping(self):
        renderer = CartRenderer(line_item_template="{quantity:02d}|{price:,}|{title:>5}|{line_price_html};")
        snapshot = CartSnapshot.from_dict(make_cart(make_item(1, 3, price=123456, title="<i>")))

        view = renderer.render(snapshot)

        assert view.items_html == '03|123,456|  &lt;i&gt;|<span class="money">3,703.68</span>;'
