"""Read side of orders: detail assembly, listing and payment lookups.

Reads are authorized here rather than in the routes so that every caller of
an order read applies the same owner-or-admin rule.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.exceptions import Forbidden, NotFound
from storefront.order.order import Order
from storefront.shipping.method import ShippingMethod
from storefront.utils.queries import find_all, paginate


def _get_or_none(aggregate_cls, identifier):
    if not identifier:
        return None
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def load_order(order_id, user_id, is_admin=False):
    """The order, provided the caller owns it or is an admin."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFound("Order not found") from None

    if not is_admin and str(order.user_id) != str(user_id):
        raise Forbidden()
    return order


def _product_summary(product_id, categories):
    product = _get_or_none(Product, product_id)
    if product is None:
        return None

    category = None
    if product.category_id:
        key = str(product.category_id)
        if key not in categories:
            categories[key] = _get_or_none(Category, key)
        found = categories[key]
        if found is not None:
            category = {"id": str(found.id), "name": found.name, "slug": found.slug}

    return {
        "id": str(product.id),
        "name": product.name,
        "slug": product.slug,
        "price": product.price,
        "discount": product.discount,
        "category": category,
    }


def _shipping_method_summary(shipping_method_id):
    method = _get_or_none(ShippingMethod, shipping_method_id)
    if method is None:
        return None
    return {
        "id": str(method.id),
        "name": method.name,
        "name_localized": method.name_localized,
        "cost": method.cost,
        "estimated_days": method.estimated_days,
    }


def payment_summary(payment):
    return {
        "id": str(payment.id),
        "amount": payment.amount,
        "status": payment.status,
        "payment_method": payment.payment_method,
        "transaction_id": payment.transaction_id,
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
    }


def order_detail(order, with_products=True):
    """Plain-dict view of an order with items, shipping and payments."""
    categories = {}
    items = []
    for item in order.items:
        items.append(
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "variant_id": str(item.variant_id) if item.variant_id else None,
                "name": item.name,
                "size": item.size,
                "color": item.color,
                "quantity": item.quantity,
                "price": item.price,
                "product": _product_summary(item.product_id, categories) if with_products else None,
            }
        )

    address = order.shipping_address
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "user_id": str(order.user_id),
        "status": order.status,
        "subtotal": order.subtotal,
        "tax": order.tax,
        "shipping": order.shipping,
        "total": order.total,
        "currency": order.currency,
        "shipping_address_id": str(order.shipping_address_id),
        "shipping_address": address.to_dict() if address else None,
        "shipping_method_id": str(order.shipping_method_id) if order.shipping_method_id else None,
        "shipping_method": _shipping_method_summary(order.shipping_method_id),
        "items": items,
        "payments": [payment_summary(p) for p in sorted(order.payments, key=lambda p: p.created_at)],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def get_order(order_id, user_id, is_admin=False):
    return order_detail(load_order(order_id, user_id, is_admin=is_admin))


def list_orders(user_id, is_admin=False, page=1, limit=20, filter_user_id=None):
    """Orders newest first, with a pagination block.

    Admins see every order, optionally narrowed to ``filter_user_id``.
    Everyone else sees only their own orders.
    """
    if is_admin:
        orders = find_all(Order, user_id=str(filter_user_id)) if filter_user_id else find_all(Order)
    else:
        orders = find_all(Order, user_id=str(user_id))

    orders = sorted(orders, key=lambda o: o.created_at, reverse=True)
    page_items, pagination = paginate(orders, page, limit)
    return [order_detail(order) for order in page_items], pagination


def list_payments(user_id, is_admin=False, order_id=None):
    """Payments visible to the caller, newest first, each tagged with its order."""
    if order_id:
        orders = [load_order(order_id, user_id, is_admin=is_admin)]
    elif is_admin:
        orders = find_all(Order)
    else:
        orders = find_all(Order, user_id=str(user_id))

    payments = []
    for order in orders:
        for payment in order.payments:
            payments.append(
                {
                    **payment_summary(payment),
                    "order_id": str(order.id),
                    "order_number": order.order_number,
                }
            )
    return sorted(payments, key=lambda p: p["created_at"], reverse=True)
