"""Shared BDD fixtures and step definitions for orders and carts."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartItemAdded
from storefront.exceptions import InsufficientStock
from storefront.order.events import OrderPlaced, OrderStatusChanged, PaymentRecorded
from storefront.order.order import Order

_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "PaymentRecorded": PaymentRecorded,
}

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartCleared": CartCleared,
}


@pytest.fixture()
def error():
    """Container for the exception raised by the last When step, if any."""
    return {"exc": None, "events_before": None}


# ---------------------------------------------------------------------------
# Given steps: Order
# ---------------------------------------------------------------------------
@given("a placed order", target_fixture="order")
def placed_order():
    return Order.place(
        order_number="ORD-01J9Z3M2Q8X7K5V4T3R2P1N0BD",
        user_id="user-1",
        items=[{"product_id": "prod-001", "name": "Linen shirt", "quantity": 2, "price": 1000.0}],
        shipping_address_id="addr-001",
        shipping=200.0,
    )


@given(parsers.cfparse('the order was moved to "{status}"'), target_fixture="order")
def order_moved_to(order, status):
    order.change_status(status)
    return order


# ---------------------------------------------------------------------------
# When steps: Order
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the order status is changed to "{status}"'))
def change_order_status(order, status, error):
    error["events_before"] = len(order._events)
    try:
        order.change_status(status)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then("the order action fails with a validation error")
def order_action_fails(error):
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("an {event_type} order event is raised"))
@then(parsers.cfparse("a {event_type} order event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in order._events)


@then("no new order events are raised")
def no_new_order_events(order, error):
    assert len(order._events) == error["events_before"]


# ---------------------------------------------------------------------------
# Cart steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart():
    return ShoppingCart.create("user-1")


def _product_id(name):
    return name.lower().replace(" ", "-")


@when(parsers.cfparse('{quantity:d} units of "{name}" with stock {stock:d} are added'))
def add_with_stock(cart, quantity, name, stock, error):
    try:
        cart.add_item(product_id=_product_id(name), name=name, price=1000.0, stock=stock, quantity=quantity)
    except InsufficientStock as exc:
        error["exc"] = exc


@when(parsers.cfparse('{quantity:d} units of "{name}" priced {price:g} with {discount:g} percent discount are added'))
def add_discounted(cart, quantity, name, price, discount):
    cart.add_item(
        product_id=_product_id(name), name=name, price=price, stock=100, quantity=quantity, discount=discount
    )


@when(parsers.cfparse('the "{name}" quantity is set to {quantity:d}'))
def set_quantity(cart, name, quantity):
    cart.update_quantity(_product_id(name), quantity)


@when("the cart is cleared")
def clear_cart(cart):
    cart.clear()


@then(parsers.cfparse("the cart has {count:d} lines"))
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_line_count(cart, count):
    assert len(cart.lines) == count


@then(parsers.cfparse('the "{name}" line has quantity {quantity:d}'))
def line_quantity(cart, name, quantity):
    assert cart.find_line(_product_id(name)).quantity == quantity


@then(parsers.cfparse("the cart total is {total:g}"))
def cart_total(cart, total):
    assert cart.total() == total


@then("the cart action fails with insufficient stock")
def cart_action_fails(error):
    assert isinstance(error["exc"], InsufficientStock)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"
