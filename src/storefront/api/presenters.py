"""Map aggregates onto response schemas."""

from storefront.api.schemas import (
    AddressResponse,
    CartLineResponse,
    CartResponse,
    CategoryNodeResponse,
    CategoryResponse,
    ProductResponse,
    ShippingMethodResponse,
    VariantResponse,
)


def _str_or_none(value):
    return str(value) if value else None


def category_response(category) -> CategoryResponse:
    return CategoryResponse(
        id=str(category.id),
        name=category.name,
        slug=category.slug,
        description=category.description,
        parent_id=_str_or_none(category.parent_id),
        display_order=category.display_order or 0,
        is_active=category.is_active,
    )


def category_node_response(node) -> CategoryNodeResponse:
    return CategoryNodeResponse(
        **category_response(node["category"]).model_dump(),
        children=[category_node_response(child) for child in node["children"]],
    )


def product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        slug=product.slug,
        description=product.description,
        category_id=_str_or_none(product.category_id),
        price=product.price,
        original_price=product.original_price,
        discount=product.discount or 0.0,
        final_price=product.unit_price(),
        quantity=product.quantity or 0,
        brand=product.brand,
        material=product.material,
        is_active=product.is_active,
        variants=[
            VariantResponse(
                id=str(v.id),
                size=v.size,
                color=v.color,
                sku=v.sku,
                quantity=v.quantity or 0,
                price=v.price,
            )
            for v in product.variants
        ],
    )


def cart_response(cart) -> CartResponse:
    if cart is None:
        return CartResponse()
    return CartResponse(
        items=[
            CartLineResponse(
                id=str(line.id),
                product_id=str(line.product_id),
                variant_id=_str_or_none(line.variant_id),
                name=line.name,
                size=line.size,
                color=line.color,
                quantity=line.quantity,
                price=line.price,
                discount=line.discount or 0.0,
                unit_price=line.unit_price,
                line_total=line.line_total,
                stock=line.stock,
            )
            for line in cart.lines
        ],
        item_count=cart.item_count,
        total=cart.total(),
        selected_shipping_method_id=_str_or_none(cart.selected_shipping_method_id),
    )


def address_response(address) -> AddressResponse:
    return AddressResponse(id=str(address.id), is_default=address.is_default, **address.snapshot())


def shipping_method_response(method) -> ShippingMethodResponse:
    return ShippingMethodResponse(
        id=str(method.id),
        name=method.name,
        name_localized=method.name_localized,
        description=method.description,
        description_localized=method.description_localized,
        cost=method.cost,
        estimated_days=method.estimated_days,
        active=method.active,
        created_at=method.created_at,
    )
