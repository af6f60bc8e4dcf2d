"""Catalogue browsing load test scenarios.

Read-heavy traffic: category tree, filtered product listings and product
detail pages. Products are seeded by an admin on start so reads hit data.
"""

import random

from locust import HttpUser, between, tag, task

from loadtests.data_generators import admin_headers, category_data, product_data
from loadtests.helpers.response import extract_error_detail


class CatalogueBrowser(HttpUser):
    """Anonymous shopper browsing the catalogue."""

    wait_time = between(0.5, 2.0)

    def on_start(self):
        headers = admin_headers()
        self.category_ids = []
        self.slugs = []

        resp = self.client.post("/api/categories", json=category_data(), headers=headers, name="POST /api/categories")
        if resp.status_code == 201:
            self.category_ids.append(resp.json()["id"])

        for _ in range(3):
            category_id = random.choice(self.category_ids) if self.category_ids else None
            payload = product_data(category_id=category_id)
            resp = self.client.post("/api/products", json=payload, headers=headers, name="POST /api/products")
            if resp.status_code == 201:
                self.slugs.append(payload["slug"])

    @tag("catalogue", "read")
    @task(2)
    def category_tree(self):
        self.client.get("/api/categories", name="GET /api/categories")

    @tag("catalogue", "read")
    @task(5)
    def browse_products(self):
        params = random.choice(
            [
                {},
                {"on_sale": True},
                {"in_stock": True},
                {"search": random.choice(["shirt", "dress", "coat"])},
            ]
        )
        if self.category_ids and random.random() < 0.3:
            params["category_id"] = random.choice(self.category_ids)
        self.client.get("/api/products", params=params, name="GET /api/products")

    @tag("catalogue", "read")
    @task(3)
    def product_detail(self):
        if not self.slugs:
            return
        with self.client.get(
            f"/api/products/{random.choice(self.slugs)}",
            catch_response=True,
            name="GET /api/products/{slug}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Product detail failed: {resp.status_code} - {extract_error_detail(resp)}")
