"""Checkout load test scenarios.

Stateful SequentialTaskSet journeys from an empty cart to a paid order:
one through the checkout endpoint, one through explicit order placement
followed by a separate payment.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    address_data,
    admin_headers,
    checkout_data,
    product_data,
    shipping_method_data,
    user_headers,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


def _seed_catalogue(client, state):
    """Create two products and a shipping method as an admin."""
    headers = admin_headers()
    for _ in range(2):
        resp = client.post("/api/products", json=product_data(), headers=headers, name="POST /api/products")
        if resp.status_code == 201:
            state.product_ids.append(resp.json()["id"])

    resp = client.post(
        "/api/shipping-methods", json=shipping_method_data(), headers=headers, name="POST /api/shipping-methods"
    )
    if resp.status_code == 201:
        state.shipping_method_id = resp.json()["id"]


class CheckoutJourney(SequentialTaskSet):
    """Add To Cart (x2) -> Summary -> Checkout -> Read Order -> List Orders."""

    def on_start(self):
        self.state = ShopperState(headers=user_headers())
        _seed_catalogue(self.client, self.state)
        if not self.state.product_ids:
            self.interrupt()

    @task
    def add_first_product(self):
        self._add(self.state.product_ids[0])

    @task
    def add_second_product(self):
        self._add(self.state.product_ids[-1])

    def _add(self, product_id):
        with self.client.post(
            "/api/cart",
            json={"product_id": product_id, "quantity": random.randint(1, 3)},
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/cart",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_items = resp.json()["item_count"]
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def checkout_summary(self):
        with self.client.get(
            "/api/checkout/summary",
            headers=self.state.headers,
            catch_response=True,
            name="GET /api/checkout/summary",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Summary failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def submit_checkout(self):
        with self.client.post(
            "/api/checkout",
            json=checkout_data(shipping_method_id=self.state.shipping_method_id),
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/checkout",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order"]["id"]
                if not body["payment_recorded"]:
                    resp.failure("Checkout placed the order but recorded no payment")
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def read_order(self):
        self.client.get(f"/api/orders/{self.state.order_id}", headers=self.state.headers, name="GET /api/orders/{id}")

    @task
    def list_orders(self):
        self.client.get("/api/orders", params={"limit": 10}, headers=self.state.headers, name="GET /api/orders")

    @task
    def done(self):
        self.interrupt()


class PlaceOrderJourney(SequentialTaskSet):
    """Save Address -> Add To Cart -> Place Order -> Record Payment -> List Payments."""

    def on_start(self):
        self.state = ShopperState(headers=user_headers())
        _seed_catalogue(self.client, self.state)
        if not self.state.product_ids:
            self.interrupt()

    @task
    def save_address(self):
        with self.client.post(
            "/api/addresses",
            json=address_data(is_default=True),
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/addresses",
        ) as resp:
            if resp.status_code == 201:
                self.state.address_id = resp.json()["id"]
            else:
                resp.failure(f"Save address failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_to_cart(self):
        self.client.post(
            "/api/cart",
            json={"product_id": random.choice(self.state.product_ids), "quantity": 1},
            headers=self.state.headers,
            name="POST /api/cart",
        )

    @task
    def place_order(self):
        with self.client.post(
            "/api/orders",
            json={"shipping_address_id": self.state.address_id, "shipping_method_id": self.state.shipping_method_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
                self.total = resp.json()["total"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def record_payment(self):
        with self.client.post(
            "/api/payments",
            json={"order_id": self.state.order_id, "amount": self.total, "payment_method": "online"},
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/payments",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Record payment failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def list_payments(self):
        self.client.get("/api/payments", headers=self.state.headers, name="GET /api/payments")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Shopper who mostly checks out, sometimes places orders directly."""

    wait_time = between(1, 3)
    tasks = {CheckoutJourney: 3, PlaceOrderJourney: 1}
