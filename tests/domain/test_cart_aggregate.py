"""Tests for ShoppingCart: merging lines, stock bounds and totals."""

import pytest
from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartItemAdded
from storefront.exceptions import InsufficientStock, NotFound


def _cart():
    return ShoppingCart.create(user_id="user-1")


def _add(cart, quantity=1, stock=5, size="M", color="black", price=1000.0, discount=0.0, product_id="prod-1"):
    cart.add_item(
        product_id=product_id,
        name="Shirt",
        price=price,
        stock=stock,
        quantity=quantity,
        size=size,
        color=color,
        discount=discount,
    )


class TestAddItem:
    def test_new_line_is_appended(self):
        cart = _cart()
        _add(cart, quantity=2)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 2

    def test_same_product_size_and_color_merges(self):
        cart = _cart()
        _add(cart, quantity=2)
        _add(cart, quantity=1)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3

    def test_different_size_gets_its_own_line(self):
        cart = _cart()
        _add(cart, size="M")
        _add(cart, size="L")
        assert len(cart.lines) == 2

    def test_exceeding_stock_is_rejected(self):
        cart = _cart()
        with pytest.raises(InsufficientStock) as exc:
            _add(cart, quantity=6, stock=5)
        assert exc.value.available_stock == 5
        assert cart.is_empty

    def test_merge_that_exceeds_stock_is_rejected(self):
        cart = _cart()
        _add(cart, quantity=4, stock=5)
        with pytest.raises(InsufficientStock):
            _add(cart, quantity=2, stock=5)
        assert cart.lines[0].quantity == 4

    def test_adding_up_to_stock_is_allowed(self):
        cart = _cart()
        _add(cart, quantity=5, stock=5)
        assert cart.lines[0].quantity == 5

    def test_raises_item_added_event(self):
        cart = _cart()
        _add(cart, quantity=2)
        event = cart._events[-1]
        assert isinstance(event, CartItemAdded)
        assert event.quantity == 2


class TestUpdateQuantity:
    def test_sets_quantity(self):
        cart = _cart()
        _add(cart, quantity=1)
        cart.update_quantity("prod-1", 3, size="M", color="black")
        assert cart.lines[0].quantity == 3

    def test_zero_removes_line(self):
        cart = _cart()
        _add(cart, quantity=1)
        cart.update_quantity("prod-1", 0, size="M", color="black")
        assert cart.is_empty

    def test_negative_removes_line(self):
        cart = _cart()
        _add(cart, quantity=1)
        cart.update_quantity("prod-1", -2, size="M", color="black")
        assert cart.is_empty

    def test_above_remembered_stock_is_rejected(self):
        cart = _cart()
        _add(cart, quantity=1, stock=3)
        with pytest.raises(InsufficientStock):
            cart.update_quantity("prod-1", 4, size="M", color="black")
        assert cart.lines[0].quantity == 1

    def test_unknown_line(self):
        cart = _cart()
        with pytest.raises(NotFound):
            cart.update_quantity("prod-x", 1)


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _cart()
        _add(cart)
        cart.remove_item("prod-1", size="M", color="black")
        assert cart.is_empty

    def test_clear_removes_everything(self):
        cart = _cart()
        _add(cart, product_id="prod-1")
        _add(cart, product_id="prod-2")
        cart.clear()
        assert cart.is_empty
        assert isinstance(cart._events[-1], CartCleared)
        assert cart._events[-1].lines_removed == 2

    def test_clearing_empty_cart_raises_no_event(self):
        cart = _cart()
        cart.clear()
        assert not any(isinstance(e, CartCleared) for e in cart._events)


class TestTotal:
    def test_total_without_discount(self):
        cart = _cart()
        _add(cart, quantity=2, price=1000.0)
        assert cart.total() == 2000.0

    def test_total_applies_discount(self):
        cart = _cart()
        _add(cart, quantity=2, price=1000.0, discount=10)
        assert cart.total() == 1800.0

    def test_total_sums_lines(self):
        cart = _cart()
        _add(cart, quantity=1, price=500.0, product_id="prod-1")
        _add(cart, quantity=3, price=100.0, product_id="prod-2")
        assert cart.total() == 800.0
        assert cart.item_count == 4

    def test_total_is_pure(self):
        cart = _cart()
        _add(cart, quantity=2, price=250.0)
        assert cart.total() == cart.total() == 500.0

    def test_empty_cart_total_is_zero(self):
        assert _cart().total() == 0.0


def test_select_shipping_method():
    cart = _cart()
    cart.select_shipping_method("ship-1")
    assert cart.selected_shipping_method_id == "ship-1"
