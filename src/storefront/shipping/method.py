"""ShippingMethod aggregate: a delivery option offered at checkout."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront


@storefront.aggregate
class ShippingMethod:
    """A named delivery option with a flat cost.

    ``name_localized`` and ``description_localized`` carry the second store
    language. Inactive methods stay readable for historical orders but cannot
    be chosen for new ones.
    """

    name = String(required=True, max_length=100)
    name_localized = String(required=True, max_length=100)
    description = Text()
    description_localized = Text()
    cost = Float(required=True, min_value=0.0)
    estimated_days = String(max_length=50)
    active = Boolean(default=True)
    display_order = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, name_localized, cost, **optional):
        now = datetime.now(UTC)
        return cls(
            name=name,
            name_localized=name_localized,
            cost=cost,
            created_at=now,
            updated_at=now,
            **optional,
        )

    def update(self, **changes):
        for field, value in changes.items():
            setattr(self, field, value)
        self.updated_at = datetime.now(UTC)
