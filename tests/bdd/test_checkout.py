"""BDD tests for checkout."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.cart.cart import ShoppingCart
from storefront.checkout.orchestration import CardDetails, CheckoutForm, run_checkout
from storefront.exceptions import StorefrontError
from storefront.order.order import Order
from storefront.utils.queries import find_all

scenarios("features/checkout.feature")

SHOPPER = "shopper-1"


@pytest.fixture()
def catalogue():
    """Product ids by name."""
    return {}


@pytest.fixture()
def checkout():
    return {"result": None, "exc": None}


def _form(payment_method="card", **fields):
    return CheckoutForm(
        payment_method=payment_method,
        full_name="Anna Petrova",
        address1="Tverskaya 7",
        city="Moscow",
        postal_code="125009",
        card=CardDetails(number="4242424242424242", expiry="12/29", cvv="123"),
        **fields,
    )


def _run(checkout, form):
    try:
        checkout["result"] = run_checkout(SHOPPER, form)
    except StorefrontError as exc:
        checkout["exc"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:g} with stock {stock:d}'))
def product(catalogue, make_product, name, price, stock):
    catalogue[name] = make_product(name=name, price=price, quantity=stock)


@given(parsers.cfparse('a shipping method "{name}" costing {cost:g}'))
def shipping_method(make_shipping_method, name, cost):
    make_shipping_method(name=name, cost=cost)


@given(parsers.cfparse('the shopper has {quantity:d} "{name}" in the cart'))
def shopper_cart(catalogue, fill_cart, quantity, name):
    fill_cart(SHOPPER, catalogue[name], quantity=quantity)


@given("another shopper has a saved address", target_fixture="foreign_address")
def foreign_address(make_address):
    return make_address(user_id="shopper-2")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper checks out paying by "{payment_method}"'))
def checks_out(checkout, payment_method):
    _run(checkout, _form(payment_method))


@when("the shopper checks out to the other shopper's address")
def checks_out_to_foreign_address(checkout, foreign_address):
    _run(checkout, _form(shipping_address_id=foreign_address))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("an order totalling {total:g} is placed"))
def order_placed(checkout, total):
    assert checkout["exc"] is None
    order = current_domain.repository_for(Order).get(checkout["result"].order_id)
    assert order.total == total


@then(parsers.cfparse('the payment is "{status}"'))
def payment_status(checkout, status):
    result = checkout["result"]
    assert result.payment_recorded
    order = current_domain.repository_for(Order).get(result.order_id)
    assert order.find_payment(result.payment_id).status == status


@then("the shopper's cart is empty")
def cart_is_empty():
    assert current_domain.repository_for(ShoppingCart).for_user(SHOPPER).is_empty


@then(parsers.cfparse("the shopper's cart still has {count:d} line"))
def cart_still_has(count):
    assert len(current_domain.repository_for(ShoppingCart).for_user(SHOPPER).lines) == count


@then("checkout is refused")
def checkout_refused(checkout):
    assert isinstance(checkout["exc"], StorefrontError)


@then("no order is placed")
def no_order():
    assert find_all(Order) == []
