"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas and the domain's validation rules (positive prices, non-empty
address fields, complete card details).
"""

import random
import uuid

from faker import Faker

fake = Faker("ru_RU")

# ---------- Identity ----------


def user_headers(role: str = "USER") -> dict:
    """Headers identifying a fresh simulated user."""
    return {"X-User-Id": f"lt-{uuid.uuid4().hex[:12]}", "X-User-Role": role}


def admin_headers() -> dict:
    return user_headers(role="ADMIN")


# ---------- Catalogue ----------


def slug(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def category_data(parent_id: str | None = None) -> dict:
    """Generate CreateCategoryRequest payload."""
    name = fake.word().capitalize()
    return {"name": name[:100], "slug": slug("cat"), "parent_id": parent_id}


def product_data(category_id: str | None = None) -> dict:
    """Generate CreateProductRequest payload with enough stock for a run."""
    word = fake.word().capitalize()
    price = round(random.uniform(500.0, 15000.0), 2)
    return {
        "name": f"{word} {random.choice(['shirt', 'dress', 'scarf', 'coat', 'jeans'])}",
        "slug": slug("prod"),
        "price": price,
        "original_price": round(price * 1.2, 2),
        "discount": random.choice([0, 0, 0, 10, 15, 25]),
        "quantity": random.randint(500, 5000),
        "category_id": category_id,
        "brand": fake.company()[:100],
        "material": random.choice(["linen", "cotton", "wool", "silk"]),
    }


def variant_data() -> dict:
    return {
        "size": random.choice(["XS", "S", "M", "L", "XL"]),
        "color": fake.color_name()[:50],
        "quantity": random.randint(100, 1000),
    }


# ---------- Shipping ----------


def shipping_method_data() -> dict:
    """Generate CreateShippingMethodRequest payload."""
    name = random.choice(["Courier", "Post", "Pickup point", "Express"])
    return {
        "name": name,
        "name_localized": name,
        "cost": random.choice([0.0, 199.0, 350.0, 590.0]),
        "estimated_days": random.choice(["1-2", "3-5", "5-7"]),
    }


# ---------- Addresses ----------


def address_data(is_default: bool = False) -> dict:
    """Generate AddressRequest payload."""
    return {
        "first_name": fake.first_name()[:100],
        "last_name": fake.last_name()[:100],
        "address1": fake.street_address()[:255],
        "city": fake.city_name()[:100],
        "postal_code": fake.postcode()[:20],
        "country": "RU",
        "phone": fake.phone_number()[:30],
        "is_default": is_default,
    }


# ---------- Checkout ----------


def card_data() -> dict:
    return {
        "number": fake.credit_card_number(),
        "expiry": fake.credit_card_expire(),
        "cvv": fake.credit_card_security_code(),
    }


def checkout_data(payment_method: str | None = None, shipping_method_id: str | None = None) -> dict:
    """Generate CheckoutRequest payload with a fresh shipping address."""
    payment_method = payment_method or random.choice(["card", "card", "online", "cash"])
    payload = {
        "payment_method": payment_method,
        "shipping_method_id": shipping_method_id,
        "full_name": fake.name()[:200],
        "phone": fake.phone_number()[:30],
        "address1": fake.street_address()[:255],
        "city": fake.city_name()[:100],
        "postal_code": fake.postcode()[:20],
        "country": "RU",
    }
    if payment_method == "card":
        payload["card"] = card_data()
    return payload
