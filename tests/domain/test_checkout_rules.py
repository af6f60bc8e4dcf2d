"""Tests for the pure checkout rules: names, shipping choice, payment status, totals."""

import pytest
from storefront.cart.cart import ShoppingCart
from storefront.checkout.orchestration import (
    CardDetails,
    choose_shipping_method,
    payment_status_for,
    split_full_name,
    summarize,
)
from storefront.exceptions import BadRequest
from storefront.shipping.method import ShippingMethod


class TestSplitFullName:
    def test_first_and_last(self):
        assert split_full_name("Anna Petrova") == ("Anna", "Petrova")

    def test_splits_at_first_space_only(self):
        assert split_full_name("Anna Maria Petrova") == ("Anna", "Maria Petrova")

    def test_single_name_is_reused(self):
        assert split_full_name("Cher") == ("Cher", "Cher")

    def test_surrounding_whitespace_is_ignored(self):
        assert split_full_name("  Anna Petrova ") == ("Anna", "Petrova")


class TestChooseShippingMethod:
    def _methods(self):
        return [
            ShippingMethod.create(name="Courier", name_localized="Kurier", cost=300.0),
            ShippingMethod.create(name="Pickup", name_localized="Samovyvoz", cost=0.0),
        ]

    def test_preferred_active_method_wins(self):
        methods = self._methods()
        assert choose_shipping_method(methods, methods[1].id) is methods[1]

    def test_falls_back_to_first(self):
        methods = self._methods()
        assert choose_shipping_method(methods, "gone") is methods[0]
        assert choose_shipping_method(methods) is methods[0]

    def test_none_when_nothing_is_active(self):
        assert choose_shipping_method([], "anything") is None


class TestPaymentStatus:
    @pytest.mark.parametrize("method, status", [("card", "COMPLETED"), ("online", "COMPLETED"), ("cash", "PENDING")])
    def test_mapping(self, method, status):
        assert payment_status_for(method) == status

    def test_unknown_method(self):
        with pytest.raises(BadRequest):
            payment_status_for("barter")


class TestSummarize:
    def test_example_totals(self):
        cart = ShoppingCart.create(user_id="user-1")
        cart.add_item(product_id="prod-1", name="Shirt", price=1000.0, stock=5, quantity=2)
        method = ShippingMethod.create(name="Courier", name_localized="Kurier", cost=200.0)

        assert summarize(cart, method) == {"subtotal": 2000.0, "shipping": 200.0, "tax": 0.0, "total": 2200.0}

    def test_without_cart_or_method(self):
        assert summarize(None) == {"subtotal": 0.0, "shipping": 0.0, "tax": 0.0, "total": 0.0}

    def test_tax_rate(self):
        cart = ShoppingCart.create(user_id="user-1")
        cart.add_item(product_id="prod-1", name="Shirt", price=100.0, stock=5, quantity=1)
        assert summarize(cart, None, tax_rate=0.2)["total"] == 120.0


class TestCardDetails:
    def test_complete(self):
        assert CardDetails(number="4242", expiry="12/29", cvv="123").is_complete()

    @pytest.mark.parametrize("missing", ["number", "expiry", "cvv"])
    def test_incomplete(self, missing):
        fields = {"number": "4242", "expiry": "12/29", "cvv": "123", missing: "  "}
        assert not CardDetails(**fields).is_complete()
