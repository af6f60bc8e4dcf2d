"""Order placement: the PlaceOrder command and its handler.

The handler is the only path that creates orders. Prices come from the
catalogue and shipping cost from the stored shipping method; amounts sent by
the client are compared and logged, never trusted. The order is saved and
the customer's cart cleared in the same unit of work.
"""

import json
import math
import time

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.config import get_settings
from storefront.customer.addresses import address_for
from storefront.domain import storefront
from storefront.exceptions import BadRequest, Conflict, NotFound
from storefront.order.numbering import next_order_number
from storefront.order.order import TOTAL_TOLERANCE, Order
from storefront.shipping.method import ShippingMethod
from storefront.utils.logging import get_logger
from storefront.utils.queries import find_all

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address_id = Identifier()
    shipping_method_id = Identifier()
    # JSON list of {product_id, quantity, price?, variant_id?, size?, color?}.
    # Left empty, the customer's cart supplies the items.
    items = Text()
    # Amounts the client displayed; compared with the server's, never stored
    subtotal = Float()
    tax = Float()
    shipping = Float()
    total = Float()


def _is_positive_number(value):
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def _is_positive_integer(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer() and value > 0
    return isinstance(value, int) and value > 0


def _requested_items(command):
    """Items from the command, or from the user's cart when none were sent."""
    if command.items is not None:
        items = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not items:
            raise BadRequest("Order items are required")
        return items

    cart = current_domain.repository_for(ShoppingCart).for_user(command.user_id)
    if cart is None or cart.is_empty:
        raise BadRequest("Cart is empty")

    return [
        {
            "product_id": str(line.product_id),
            "variant_id": str(line.variant_id) if line.variant_id else None,
            "size": line.size,
            "color": line.color,
            "quantity": line.quantity,
            "price": line.unit_price,
        }
        for line in cart.lines
    ]


def _price_items(requested):
    """Validate requested items and price them from the catalogue."""
    products = current_domain.repository_for(Product)
    priced = []

    for item in requested:
        product_id = item.get("product_id")
        quantity = item.get("quantity")
        client_price = item.get("price")

        if client_price is not None and not _is_positive_number(client_price):
            raise BadRequest(f"Invalid price for product {product_id}: {client_price}")
        if not _is_positive_integer(quantity):
            raise BadRequest(f"Invalid quantity for product {product_id}: {quantity}")

        if not product_id:
            raise BadRequest("Each order item needs a product_id")
        try:
            product = products.get(product_id)
        except ObjectNotFoundError:
            raise BadRequest(f"Product {product_id} not found") from None

        variant = None
        if item.get("variant_id"):
            variant = product.find_variant(item["variant_id"])
            if variant is None:
                raise BadRequest(f"Variant {item['variant_id']} not found for product {product_id}")
        elif product.variants and (item.get("size") or item.get("color")):
            variant = product.variant_for(item.get("size"), item.get("color"))

        price = product.unit_price(variant)
        if not _is_positive_number(price):
            raise BadRequest(f"Invalid price for product {product_id}: {price}")

        if client_price is not None and abs(client_price - price) > TOTAL_TOLERANCE:
            logger.warning(
                "client_price_mismatch",
                product_id=str(product_id),
                client_price=client_price,
                catalogue_price=price,
            )

        priced.append(
            {
                "product_id": str(product.id),
                "variant_id": str(variant.id) if variant else None,
                "name": product.name,
                "size": variant.size if variant else item.get("size"),
                "color": variant.color if variant else item.get("color"),
                "quantity": int(quantity),
                "price": price,
            }
        )

    return priced


def _shipping_address_snapshot(user_id, address_id):
    """Resolve the user's address, retrying once if it is not visible yet.

    A freshly created address can lag behind the request that places the
    order. Missing after the retries means the address does not exist or
    belongs to someone else. Unexpected lookup failures are logged and the
    order proceeds with the address id alone.
    """
    settings = get_settings()
    attempts = 1 + max(settings.address_retry_attempts, 0)

    try:
        for attempt in range(attempts):
            address = address_for(user_id, address_id)
            if address is not None:
                return address.snapshot()
            if attempt + 1 < attempts:
                logger.info("shipping_address_retry", address_id=str(address_id), attempt=attempt + 1)
                time.sleep(settings.address_retry_delay)
    except Exception:
        logger.exception("shipping_address_lookup_failed", address_id=str(address_id), user_id=str(user_id))
        return None

    raise NotFound("Shipping address not found or doesn't belong to user")


def _shipping_method(shipping_method_id):
    if not shipping_method_id:
        return None
    try:
        method = current_domain.repository_for(ShippingMethod).get(shipping_method_id)
    except ObjectNotFoundError:
        raise NotFound("Shipping method not found") from None
    if not method.active:
        raise BadRequest("Shipping method is not available")
    return method


def _log_client_total_mismatch(command, order):
    for field in ("subtotal", "tax", "shipping", "total"):
        claimed = getattr(command, field)
        actual = getattr(order, field)
        if claimed is not None and abs(claimed - actual) > TOTAL_TOLERANCE:
            logger.warning(
                "client_total_mismatch",
                order_number=order.order_number,
                field=field,
                client_value=claimed,
                server_value=actual,
            )


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if not command.shipping_address_id:
            raise BadRequest("Shipping address is required")

        requested = _requested_items(command)
        items = _price_items(requested)
        address = _shipping_address_snapshot(command.user_id, command.shipping_address_id)
        method = _shipping_method(command.shipping_method_id)

        order_number = next_order_number()
        if find_all(Order, order_number=order_number):
            raise Conflict("Order number already exists. Please try again.")

        settings = get_settings()
        order = Order.place(
            order_number=order_number,
            user_id=command.user_id,
            items=items,
            shipping_address_id=command.shipping_address_id,
            shipping_address=address,
            shipping=method.cost if method else 0.0,
            tax_rate=settings.tax_rate,
            shipping_method_id=str(method.id) if method else None,
            currency=settings.currency,
        )
        _log_client_total_mismatch(command, order)
        current_domain.repository_for(Order).add(order)

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.for_user(command.user_id)
        if cart is not None and not cart.is_empty:
            cart.clear()
            cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            total=order.total,
        )
        return str(order.id)
