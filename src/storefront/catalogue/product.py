"""Product aggregate with size/colour Variant entities.

Stock is tracked on the product and, when a product comes in sizes or
colours, on each variant. The cart reads these quantities to bound what a
shopper can add.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.events import PricingChanged, ProductAdded, StockAdjusted, VariantAdded
from storefront.domain import storefront


def discounted(price, discount):
    """Apply a percentage discount and round to cents."""
    if not discount:
        return round(price, 2)
    return round(price * (1 - discount / 100), 2)


@storefront.entity(part_of="Product")
class Variant:
    """A specific size/colour instance of a product with its own stock."""

    size: String(max_length=50)
    color: String(max_length=50)
    sku: String(max_length=64)
    quantity: Integer(default=0, min_value=0)
    price: Float(min_value=0.0)

    def matches(self, size, color):
        return (self.size or None) == (size or None) and (self.color or None) == (color or None)


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255, unique=True)
    description: Text()
    category_id: Identifier()
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)
    quantity: Integer(default=0, min_value=0)
    brand: String(max_length=100)
    material: String(max_length=100)
    is_active: Boolean(default=True)
    variants: HasMany(Variant)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def price_must_be_positive(self):
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    @invariant.post
    def variants_must_be_unique_per_size_and_color(self):
        seen = set()
        for variant in self.variants:
            key = (variant.size or None, variant.color or None)
            if key in seen:
                raise ValidationError({"variants": ["A variant with this size and color already exists"]})
            seen.add(key)

    @classmethod
    def create(
        cls,
        name,
        slug,
        price,
        category_id=None,
        description=None,
        original_price=None,
        discount=0.0,
        quantity=0,
        brand=None,
        material=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug,
            price=price,
            category_id=category_id,
            description=description,
            original_price=original_price,
            discount=discount or 0.0,
            quantity=quantity or 0,
            brand=brand,
            material=material,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                slug=slug,
                category_id=category_id,
                price=price,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def variant_for(self, size=None, color=None):
        """Return the variant matching size and colour, if the product has one."""
        return next((v for v in self.variants if v.matches(size, color)), None)

    def find_variant(self, variant_id):
        return next((v for v in self.variants if str(v.id) == str(variant_id)), None)

    def unit_price(self, variant=None):
        """Price a shopper pays for one unit, after the product discount."""
        base = variant.price if variant is not None and variant.price else self.price
        return discounted(base, self.discount)

    def available_stock(self, variant=None):
        return variant.quantity if variant is not None else self.quantity

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_variant(self, size=None, color=None, quantity=0, sku=None, price=None):
        if self.variant_for(size, color) is not None:
            raise ValidationError({"variants": ["A variant with this size and color already exists"]})

        variant = Variant(size=size, color=color, quantity=quantity, sku=sku, price=price)
        self.add_variants(variant)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantAdded(
                product_id=self.id,
                variant_id=variant.id,
                size=size,
                color=color,
                quantity=quantity,
            )
        )
        return variant

    def set_stock(self, quantity, variant_id=None):
        if quantity < 0:
            raise ValidationError({"quantity": ["Stock cannot be negative"]})

        if variant_id:
            variant = self.find_variant(variant_id)
            if variant is None:
                raise ValidationError({"variant_id": [f"Variant {variant_id} not found"]})
            previous = variant.quantity
            variant.quantity = quantity
        else:
            previous = self.quantity
            self.quantity = quantity

        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAdjusted(
                product_id=self.id,
                variant_id=variant_id,
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def update_pricing(self, price=None, discount=None, original_price=None):
        if price is not None:
            self.price = price
        if discount is not None:
            self.discount = discount
        if original_price is not None:
            self.original_price = original_price
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PricingChanged(
                product_id=self.id,
                price=self.price,
                original_price=self.original_price,
                discount=self.discount,
            )
        )
