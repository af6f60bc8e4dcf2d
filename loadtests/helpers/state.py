"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across
users. State tracks ids returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks state for a single simulated shopper."""

    headers: dict = field(default_factory=dict)
    product_ids: list[str] = field(default_factory=list)
    address_id: str | None = None
    shipping_method_id: str | None = None
    order_id: str | None = None
    cart_items: int = 0


@dataclass
class AdminState:
    """Tracks the catalogue and orders an admin user works on."""

    headers: dict = field(default_factory=dict)
    category_ids: list[str] = field(default_factory=list)
    product_ids: list[str] = field(default_factory=list)
    shipping_method_ids: list[str] = field(default_factory=list)
    order_statuses: dict[str, str] = field(default_factory=dict)
