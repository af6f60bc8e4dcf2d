"""Tests for Product pricing, variants and stock."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import StockAdjusted
from storefront.catalogue.product import Product, discounted


def _product(**overrides):
    fields = {"name": "Shirt", "slug": "shirt", "price": 1000.0, "quantity": 5}
    fields.update(overrides)
    return Product.create(**fields)


def test_discounted():
    assert discounted(1000.0, 15) == 850.0
    assert discounted(999.99, 0) == 999.99


def test_unit_price_applies_discount():
    assert _product(discount=10).unit_price() == 900.0


def test_variant_price_overrides_product_price():
    product = _product(discount=10)
    variant = product.add_variant(size="L", color="red", quantity=2, price=1200.0)
    assert product.unit_price(variant) == 1080.0


def test_variant_lookup_by_size_and_color():
    product = _product()
    variant = product.add_variant(size="M", color="black", quantity=3)
    assert product.variant_for("M", "black") is variant
    assert product.variant_for("L", "black") is None
    assert product.available_stock(variant) == 3
    assert product.available_stock() == 5


def test_duplicate_variant_is_rejected():
    product = _product()
    product.add_variant(size="M", color="black", quantity=3)
    with pytest.raises(ValidationError):
        product.add_variant(size="M", color="black", quantity=1)


def test_set_stock_on_variant():
    product = _product()
    variant = product.add_variant(size="M", quantity=3)
    product.set_stock(7, variant_id=variant.id)
    assert variant.quantity == 7
    event = product._events[-1]
    assert isinstance(event, StockAdjusted)
    assert event.previous_quantity == 3


def test_negative_stock_is_rejected():
    with pytest.raises(ValidationError):
        _product().set_stock(-1)


def test_price_must_be_positive():
    with pytest.raises(ValidationError):
        _product(price=0.0)
