"""Back-office load test scenarios.

An admin walks orders through the status machine while shoppers keep
placing them. Orders are created by the admin's own seeded shopper so the
admin always has something to advance.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    address_data,
    admin_headers,
    category_data,
    product_data,
    shipping_method_data,
    user_headers,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState

class OrderFulfilmentJourney(SequentialTaskSet):
    """Create Catalogue -> Shopper Orders -> PROCESSING -> SHIPPED -> DELIVERED -> Browse Orders."""

    def on_start(self):
        self.state = AdminState(headers=admin_headers())
        self.shopper = user_headers()
        self.order_id = None

    @task
    def create_catalogue(self):
        resp = self.client.post(
            "/api/categories", json=category_data(), headers=self.state.headers, name="POST /api/categories"
        )
        category_id = resp.json()["id"] if resp.status_code == 201 else None

        resp = self.client.post(
            "/api/products",
            json=product_data(category_id=category_id),
            headers=self.state.headers,
            name="POST /api/products",
        )
        if resp.status_code != 201:
            self.interrupt()
        self.state.product_ids.append(resp.json()["id"])

        resp = self.client.post(
            "/api/shipping-methods",
            json=shipping_method_data(),
            headers=self.state.headers,
            name="POST /api/shipping-methods",
        )
        if resp.status_code == 201:
            self.state.shipping_method_ids.append(resp.json()["id"])

    @task
    def shopper_orders(self):
        address = self.client.post(
            "/api/addresses", json=address_data(), headers=self.shopper, name="POST /api/addresses"
        ).json()
        self.client.post(
            "/api/cart",
            json={"product_id": self.state.product_ids[-1], "quantity": 1},
            headers=self.shopper,
            name="POST /api/cart",
        )
        with self.client.post(
            "/api/orders",
            json={
                "shipping_address_id": address.get("id"),
                "shipping_method_id": self.state.shipping_method_ids[-1] if self.state.shipping_method_ids else None,
            },
            headers=self.shopper,
            catch_response=True,
            name="POST /api/orders",
        ) as resp:
            if resp.status_code == 201:
                self.order_id = resp.json()["id"]
                self.state.order_statuses[self.order_id] = "PENDING"
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def advance_processing(self):
        self._advance("PROCESSING")

    @task
    def advance_shipped(self):
        self._advance("SHIPPED")

    @task
    def advance_delivered(self):
        self._advance("DELIVERED")

    def _advance(self, status):
        with self.client.patch(
            f"/api/orders/{self.order_id}",
            json={"status": status},
            headers=self.state.headers,
            catch_response=True,
            name="PATCH /api/orders/{id}",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_statuses[self.order_id] = status
            else:
                resp.failure(f"Move to {status} failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def browse_orders(self):
        self.client.get(
            "/api/orders", params={"page": 1, "limit": 50}, headers=self.state.headers, name="GET /api/orders"
        )

    @task
    def done(self):
        self.interrupt()


class AdminUser(HttpUser):
    wait_time = between(2, 5)
    tasks = [OrderFulfilmentJourney]
