import pytest
from fastapi.testclient import TestClient
from storefront.api import create_app
from storefront.domain import storefront

SHOPPER = {"X-User-Id": "user-1"}
OTHER_SHOPPER = {"X-User-Id": "user-2"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}


@pytest.fixture()
def client():
    return TestClient(create_app(storefront))


@pytest.fixture()
def shopper():
    return dict(SHOPPER)


@pytest.fixture()
def other_shopper():
    return dict(OTHER_SHOPPER)


@pytest.fixture()
def admin():
    return dict(ADMIN)
