"""Domain events for the catalogue aggregates."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    """A category was added to the catalogue tree."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    parent_id: Identifier()


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
    category_id: Identifier()
    price: Float(required=True)


@storefront.event(part_of="Product")
class VariantAdded:
    """A size/colour variant was added to a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    size: String(max_length=50)
    color: String(max_length=50)
    quantity: Integer(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """The tracked quantity of a product or one of its variants changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier()
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)


@storefront.event(part_of="Product")
class PricingChanged:
    """Price, original price or discount of a product changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    price: Float(required=True)
    original_price: Float()
    discount: Float()
