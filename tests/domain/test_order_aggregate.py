"""Tests for Order placement: server-computed totals and the total invariant."""

import pytest
from protean.exceptions import ValidationError
from storefront.order.events import OrderPlaced
from storefront.order.order import Order, OrderStatus

_ITEMS = [{"product_id": "prod-1", "quantity": 2, "price": 1000.0}]


def _place(items=None, shipping=0.0, tax_rate=0.0, **overrides):
    return Order.place(
        order_number=overrides.pop("order_number", "ORD-TEST"),
        user_id=overrides.pop("user_id", "user-1"),
        items=items or _ITEMS,
        shipping_address_id="addr-1",
        shipping=shipping,
        tax_rate=tax_rate,
        **overrides,
    )


class TestPlace:
    def test_subtotal_shipping_and_total(self):
        order = _place(shipping=200.0)
        assert order.subtotal == 2000.0
        assert order.shipping == 200.0
        assert order.tax == 0.0
        assert order.total == 2200.0

    def test_tax_rate_applies_to_subtotal(self):
        order = _place(tax_rate=0.2, shipping=100.0)
        assert order.tax == 400.0
        assert order.total == 2500.0

    def test_starts_pending(self):
        assert _place().status == OrderStatus.PENDING.value

    def test_multiple_items(self):
        order = _place(
            items=[
                {"product_id": "prod-1", "quantity": 1, "price": 19.99},
                {"product_id": "prod-2", "quantity": 3, "price": 5.01},
            ]
        )
        assert order.subtotal == 35.02
        assert order.total == 35.02

    def test_address_snapshot(self):
        order = _place(shipping_address={"first_name": "Anna", "city": "Moscow", "postal_code": "125009"})
        assert order.shipping_address.city == "Moscow"

    def test_raises_order_placed(self):
        order = _place(shipping=200.0)
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.total == 2200.0
        assert event.item_count == 2

    def test_order_needs_items(self):
        with pytest.raises(ValidationError):
            Order.place(
                order_number="ORD-EMPTY",
                user_id="user-1",
                items=[],
                shipping_address_id="addr-1",
            )


class TestTotalInvariant:
    def test_total_must_match_components(self):
        order = _place(shipping=200.0)
        with pytest.raises(ValidationError) as exc:
            order.total = 9999.0
        assert "total" in exc.value.messages

    def test_rounding_within_tolerance_is_accepted(self):
        order = _place()
        order.total = order.total + 0.005
        assert order.total == pytest.approx(2000.005)
