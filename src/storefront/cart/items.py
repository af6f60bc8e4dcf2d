"""Cart item management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import BadRequest, NotFound
from storefront.shipping.management import get_shipping_method


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(max_length=50)
    color = String(max_length=50)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(max_length=50)
    color = String(max_length=50)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(max_length=50)
    color = String(max_length=50)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class SelectShippingMethod:
    user_id = Identifier(required=True)
    shipping_method_id = Identifier()


def _existing_cart(user_id):
    repo = current_domain.repository_for(ShoppingCart)
    cart = repo.for_user(user_id)
    if cart is None:
        raise NotFound("Item not found in cart")
    return repo, cart


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        try:
            product = current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError:
            raise NotFound("Product not found") from None
        if not product.is_active:
            raise BadRequest("Product is not available")

        variant = product.variant_for(command.size, command.color)
        if variant is None and product.variants:
            raise BadRequest("Selected size and color are not available for this product")

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user_or_new(command.user_id)
        cart.add_item(
            product_id=str(product.id),
            variant_id=str(variant.id) if variant else None,
            name=product.name,
            size=command.size,
            color=command.color,
            quantity=command.quantity,
            price=variant.price if variant is not None and variant.price else product.price,
            discount=product.discount,
            stock=product.available_stock(variant),
        )
        repo.add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo, cart = _existing_cart(command.user_id)
        cart.update_quantity(
            product_id=command.product_id,
            quantity=command.quantity,
            size=command.size,
            color=command.color,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo, cart = _existing_cart(command.user_id)
        cart.remove_item(command.product_id, size=command.size, color=command.color)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            return
        cart.clear()
        repo.add(cart)

    @handle(SelectShippingMethod)
    def select_shipping_method(self, command):
        if command.shipping_method_id:
            get_shipping_method(command.shipping_method_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user_or_new(command.user_id)
        cart.select_shipping_method(command.shipping_method_id)
        repo.add(cart)
