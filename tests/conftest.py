import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be
    referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    import storefront.api  # noqa: F401  registers every domain element
    from storefront.domain import storefront

    storefront.init()
    storefront.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def no_address_retry_delay(monkeypatch):
    monkeypatch.setenv("STOREFRONT_ADDRESS_RETRY_DELAY", "0")


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Builders shared by application, integration and BDD tests
# ---------------------------------------------------------------------------
@pytest.fixture
def make_product():
    from protean import current_domain
    from storefront.catalogue.management import AddVariant, CreateProduct

    counter = {"n": 0}

    def _make(name="Linen shirt", price=1000.0, quantity=10, discount=0.0, category_id=None, variants=None):
        counter["n"] += 1
        product_id = current_domain.process(
            CreateProduct(
                name=name,
                slug=f"{name.lower().replace(' ', '-')}-{counter['n']}",
                price=price,
                quantity=quantity,
                discount=discount,
                category_id=category_id,
            ),
            asynchronous=False,
        )
        for variant in variants or []:
            current_domain.process(AddVariant(product_id=product_id, **variant), asynchronous=False)
        return product_id

    return _make


@pytest.fixture
def make_address():
    from protean import current_domain
    from storefront.customer.addresses import AddAddress

    def _make(user_id="user-1", is_default=False, city="Moscow"):
        return current_domain.process(
            AddAddress(
                user_id=user_id,
                first_name="Anna",
                last_name="Petrova",
                address1="Tverskaya 7",
                city=city,
                postal_code="125009",
                country="RU",
                is_default=is_default,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture
def make_shipping_method():
    from protean import current_domain
    from storefront.shipping.management import CreateShippingMethod

    def _make(name="Courier", cost=200.0, active=True):
        return current_domain.process(
            CreateShippingMethod(name=name, name_localized=f"{name} (ru)", cost=cost, active=active),
            asynchronous=False,
        )

    return _make


@pytest.fixture
def fill_cart():
    from protean import current_domain
    from storefront.cart.items import AddToCart

    def _fill(user_id, product_id, quantity=1, size=None, color=None):
        current_domain.process(
            AddToCart(user_id=user_id, product_id=product_id, quantity=quantity, size=size, color=color),
            asynchronous=False,
        )

    return _fill


@pytest.fixture
def place_order(make_product, make_address, fill_cart):
    """Place an order for ``user_id`` with one product and return its id."""
    from protean import current_domain
    from storefront.order.placement import PlaceOrder

    def _place(user_id="user-1", price=1000.0, quantity=1, shipping_method_id=None):
        product_id = make_product(price=price)
        address_id = make_address(user_id=user_id)
        fill_cart(user_id, product_id, quantity=quantity)
        return current_domain.process(
            PlaceOrder(user_id=user_id, shipping_address_id=address_id, shipping_method_id=shipping_method_id),
            asynchronous=False,
        )

    return _place
