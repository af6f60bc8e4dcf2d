"""Integration tests for category and product endpoints."""


def _create_category(client, admin, name, slug, parent_id=None):
    response = client.post("/api/categories", json={"name": name, "slug": slug, "parent_id": parent_id}, headers=admin)
    assert response.status_code == 201
    return response.json()["id"]


def _create_product(client, admin, **fields):
    body = {"name": "Linen shirt", "slug": "linen-shirt", "price": 1000.0, "quantity": 5}
    body.update(fields)
    response = client.post("/api/products", json=body, headers=admin)
    assert response.status_code == 201
    return response.json()["id"]


class TestCategories:
    def test_tree(self, client, admin):
        women = _create_category(client, admin, "Women", "women")
        _create_category(client, admin, "Dresses", "dresses", parent_id=women)

        tree = client.get("/api/categories").json()
        assert [node["slug"] for node in tree] == ["women"]
        assert [child["slug"] for child in tree[0]["children"]] == ["dresses"]

    def test_duplicate_slug_conflicts(self, client, admin):
        _create_category(client, admin, "Women", "women")
        response = client.post("/api/categories", json={"name": "Women 2", "slug": "women"}, headers=admin)
        assert response.status_code == 409

    def test_unknown_parent(self, client, admin):
        response = client.post(
            "/api/categories", json={"name": "Dresses", "slug": "dresses", "parent_id": "ghost"}, headers=admin
        )
        assert response.status_code == 404


class TestProducts:
    def test_read_by_id_and_slug(self, client, admin):
        product_id = _create_product(client, admin, discount=10)

        by_id = client.get(f"/api/products/{product_id}").json()
        by_slug = client.get("/api/products/linen-shirt").json()
        assert by_id["id"] == by_slug["id"] == product_id
        assert by_id["final_price"] == 900.0

    def test_filter_by_category_includes_subcategories(self, client, admin):
        women = _create_category(client, admin, "Women", "women")
        dresses = _create_category(client, admin, "Dresses", "dresses", parent_id=women)
        _create_product(client, admin, name="Summer dress", slug="summer-dress", category_id=dresses)
        _create_product(client, admin, name="Scarf", slug="scarf")

        listed = client.get("/api/products", params={"category_id": women}).json()
        assert [p["slug"] for p in listed] == ["summer-dress"]

    def test_variants_and_stock(self, client, admin):
        product_id = _create_product(client, admin)
        response = client.post(
            f"/api/products/{product_id}/variants", json={"size": "M", "color": "white", "quantity": 3}, headers=admin
        )
        assert response.status_code == 201
        variant_id = response.json()["id"]

        response = client.put(
            f"/api/products/{product_id}/stock", json={"quantity": 7, "variant_id": variant_id}, headers=admin
        )
        assert response.status_code == 200

        variants = client.get(f"/api/products/{product_id}").json()["variants"]
        assert variants[0]["quantity"] == 7

    def test_duplicate_variant(self, client, admin):
        product_id = _create_product(client, admin)
        body = {"size": "M", "color": "white", "quantity": 3}
        client.post(f"/api/products/{product_id}/variants", json=body, headers=admin)
        response = client.post(f"/api/products/{product_id}/variants", json=body, headers=admin)
        assert response.status_code == 400

    def test_pricing_update(self, client, admin):
        product_id = _create_product(client, admin)
        response = client.patch(f"/api/products/{product_id}/pricing", json={"discount": 25}, headers=admin)
        assert response.status_code == 200
        assert client.get(f"/api/products/{product_id}").json()["final_price"] == 750.0

    def test_unknown_product(self, client):
        assert client.get("/api/products/ghost").status_code == 404

    def test_non_positive_price_rejected(self, client, admin):
        response = client.post("/api/products", json={"name": "Free", "slug": "free", "price": 0}, headers=admin)
        assert response.status_code == 400
