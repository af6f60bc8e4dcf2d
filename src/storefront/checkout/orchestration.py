"""Checkout: turn the cart, a shipping form and a payment choice into an order.

Steps run in order, each through its own command, once the cart is known
to hold items:
    1. validate card details when paying by card
    2. reuse the chosen address or save the form's address as the default
    3. store the chosen shipping method on the cart
    4. place the order from the cart (cart cleared in the same unit of work)
    5. record the payment

Payment is recorded after the order exists and is not compensated: if it
fails, the order stands with no payments and the result says so.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import SelectShippingMethod
from storefront.config import get_settings
from storefront.customer.addresses import AddAddress
from storefront.exceptions import BadRequest
from storefront.order.order import PaymentStatus
from storefront.order.payment import RecordPayment
from storefront.order.placement import PlaceOrder
from storefront.order.queries import load_order
from storefront.shipping.management import list_shipping_methods
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# Methods settled at checkout; everything else is collected on delivery
_PREPAID_METHODS = {"card", "online"}
_ON_DELIVERY_METHODS = {"cash"}


@dataclass
class CardDetails:
    number: str | None = None
    expiry: str | None = None
    cvv: str | None = None

    def is_complete(self) -> bool:
        return all(value and value.strip() for value in (self.number, self.expiry, self.cvv))


@dataclass
class CheckoutForm:
    payment_method: str = "card"
    shipping_address_id: str | None = None
    shipping_method_id: str | None = None
    full_name: str | None = None
    phone: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    card: CardDetails | None = None


@dataclass
class CheckoutResult:
    order_id: str
    payment_id: str | None
    payment_status: str | None

    @property
    def payment_recorded(self) -> bool:
        return self.payment_id is not None


def split_full_name(full_name):
    """Split at the first space. Without a last name, the first name is reused."""
    parts = (full_name or "").strip().split(" ", 1)
    first_name = parts[0]
    last_name = parts[1].strip() if len(parts) > 1 and parts[1].strip() else first_name
    return first_name, last_name


def choose_shipping_method(active_methods, preferred_id=None):
    """The preferred method if it is active, else the first active one."""
    if not active_methods:
        return None
    if preferred_id:
        preferred = next((m for m in active_methods if str(m.id) == str(preferred_id)), None)
        if preferred is not None:
            return preferred
    return active_methods[0]


def payment_status_for(payment_method):
    if payment_method in _PREPAID_METHODS:
        return PaymentStatus.COMPLETED.value
    if payment_method in _ON_DELIVERY_METHODS:
        return PaymentStatus.PENDING.value
    raise BadRequest(f"Unsupported payment method: {payment_method}")


def summarize(cart, shipping_method=None, tax_rate=0.0):
    """Totals preview shown before the order is placed."""
    subtotal = cart.total() if cart is not None else 0.0
    shipping = round(shipping_method.cost, 2) if shipping_method is not None else 0.0
    tax = round(subtotal * (tax_rate or 0.0), 2)
    return {
        "subtotal": subtotal,
        "shipping": shipping,
        "tax": tax,
        "total": round(subtotal + shipping + tax, 2),
    }


def checkout_summary(user_id, shipping_method_id=None):
    """Cart, active shipping methods, the method checkout would use and totals."""
    settings = get_settings()
    cart = current_domain.repository_for(ShoppingCart).for_user(user_id)
    methods = list_shipping_methods(active_only=True)
    preferred = shipping_method_id or (cart.selected_shipping_method_id if cart else None)
    method = choose_shipping_method(methods, preferred)
    return {
        "cart": cart,
        "shipping_methods": methods,
        "selected_shipping_method": method,
        "totals": summarize(cart, method, settings.tax_rate),
        "currency": settings.currency,
    }


def _ensure_address(user_id, form):
    if form.shipping_address_id:
        return form.shipping_address_id

    missing = [f for f in ("full_name", "address1", "city", "postal_code") if not getattr(form, f)]
    if missing:
        raise BadRequest(f"Missing shipping fields: {', '.join(missing)}")

    first_name, last_name = split_full_name(form.full_name)
    return current_domain.process(
        AddAddress(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            address1=form.address1,
            address2=form.address2,
            city=form.city,
            state=form.state,
            postal_code=form.postal_code,
            country=form.country or get_settings().default_country,
            phone=form.phone,
            is_default=True,
        ),
        asynchronous=False,
    )


def run_checkout(user_id, form):
    payment_status = payment_status_for(form.payment_method)
    if form.payment_method == "card" and (form.card is None or not form.card.is_complete()):
        raise BadRequest("Card number, expiry date and CVV are required for card payments")

    cart = current_domain.repository_for(ShoppingCart).for_user(user_id)
    if cart is None or cart.is_empty:
        raise BadRequest("Cart is empty")

    address_id = _ensure_address(user_id, form)

    preferred = form.shipping_method_id or cart.selected_shipping_method_id
    method = choose_shipping_method(list_shipping_methods(active_only=True), preferred)

    if method is not None:
        current_domain.process(
            SelectShippingMethod(user_id=user_id, shipping_method_id=str(method.id)),
            asynchronous=False,
        )

    order_id = current_domain.process(
        PlaceOrder(
            user_id=user_id,
            shipping_address_id=address_id,
            shipping_method_id=str(method.id) if method else None,
        ),
        asynchronous=False,
    )

    try:
        order = load_order(order_id, user_id)
        payment_id = current_domain.process(
            RecordPayment(
                order_id=order_id,
                amount=order.total,
                payment_method=form.payment_method,
                status=payment_status,
            ),
            asynchronous=False,
        )
    except Exception:
        logger.exception("checkout_payment_failed", order_id=order_id, user_id=str(user_id))
        return CheckoutResult(order_id=order_id, payment_id=None, payment_status=None)

    logger.info("checkout_completed", order_id=order_id, payment_id=payment_id, payment_status=payment_status)
    return CheckoutResult(order_id=order_id, payment_id=payment_id, payment_status=payment_status)
