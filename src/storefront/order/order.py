"""Order aggregate: the immutable record of a purchase and its payments.

Items and amounts are fixed when the order is placed. Afterwards only the
order status (through the transitions below) and the status of its payments
change.

State machine:
    PENDING -> PROCESSING -> SHIPPED -> DELIVERED
    PENDING / PROCESSING / SHIPPED -> CANCELLED
    DELIVERED and CANCELLED are terminal.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.exceptions import NotFound
from storefront.order.events import OrderPlaced, OrderStatusChanged, PaymentRecorded, PaymentStatusChanged

# Largest tolerated gap between total and subtotal + tax + shipping
TOTAL_TOLERANCE = 0.01


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def _parse(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field: [f"Invalid {field} '{value}'. Expected one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, copied from the address book at order time.

    Later edits to the saved address do not change orders already placed.
    """

    first_name = String(max_length=100)
    last_name = String(max_length=100)
    company = String(max_length=150)
    address1 = String(max_length=255)
    address2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)
    phone = String(max_length=30)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line. ``price`` is the unit price charged at order time."""

    product_id = Identifier(required=True)
    variant_id = Identifier()
    name = String(max_length=255)
    size = String(max_length=50)
    color = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return round(self.price * self.quantity, 2)


@storefront.entity(part_of="Order")
class Payment:
    amount = Float(required=True, min_value=0.0)
    status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(required=True, max_length=30)
    transaction_id = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=40, unique=True)
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    subtotal = Float(required=True, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="RUB")
    shipping_address_id = Identifier(required=True)
    shipping_address = ValueObject(ShippingAddress)
    shipping_method_id = Identifier()
    items = HasMany(OrderItem)
    payments = HasMany(Payment)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_components(self):
        expected = (self.subtotal or 0.0) + (self.tax or 0.0) + (self.shipping or 0.0)
        if abs((self.total or 0.0) - expected) > TOTAL_TOLERANCE:
            raise ValidationError(
                {"total": [f"Total {self.total} does not equal subtotal + tax + shipping ({expected:.2f})"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        user_id,
        items,
        shipping_address_id,
        shipping=0.0,
        tax_rate=0.0,
        shipping_address=None,
        shipping_method_id=None,
        currency="RUB",
    ):
        """Create an order from priced items.

        Args:
            items: List of dicts with product_id, quantity, price and
                optionally variant_id, name, size, color.
            shipping: Cost of the chosen shipping method, 0 without one.
            tax_rate: Fraction of the subtotal charged as tax.
            shipping_address: Dict of address fields to snapshot, if known.
        """
        if not items:
            raise ValidationError({"items": ["Order items are required"]})

        now = datetime.now(UTC)
        order_items = [OrderItem(**item) for item in items]

        subtotal = round(sum(item.line_total for item in order_items), 2)
        shipping = round(shipping or 0.0, 2)
        tax = round(subtotal * (tax_rate or 0.0), 2)
        total = round(subtotal + tax + shipping, 2)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            total=total,
            currency=currency,
            shipping_address_id=shipping_address_id,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            shipping_method_id=shipping_method_id,
            items=order_items,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order_number,
                user_id=user_id,
                item_count=sum(item.quantity for item in order_items),
                subtotal=subtotal,
                tax=tax,
                shipping=shipping,
                total=total,
                shipping_method_id=shipping_method_id,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Order status
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def change_status(self, new_status):
        """Move the order to ``new_status``.

        Returns False when the order already has that status; nothing changes
        and no event is raised.
        """
        target = _parse(OrderStatus, new_status, "status")
        current = OrderStatus(self.status)
        if target == current:
            return False

        self._assert_can_transition(target)

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------
    def find_payment(self, payment_id):
        return next((p for p in self.payments if str(p.id) == str(payment_id)), None)

    def record_payment(self, amount, payment_method, status=PaymentStatus.PENDING.value, transaction_id=None):
        payment_status = _parse(PaymentStatus, status, "status")
        now = datetime.now(UTC)

        payment = Payment(
            amount=amount,
            payment_method=payment_method,
            status=payment_status.value,
            transaction_id=transaction_id,
            created_at=now,
            updated_at=now,
        )
        self.add_payments(payment)
        self.updated_at = now

        self.raise_(
            PaymentRecorded(
                order_id=self.id,
                payment_id=payment.id,
                amount=amount,
                payment_method=payment_method,
                status=payment_status.value,
                recorded_at=now,
            )
        )
        return payment

    def change_payment_status(self, payment_id, new_status, transaction_id=None):
        """Set a payment's status. Any status may follow any other.

        Returns False when the payment already has that status and no new
        transaction id was supplied.
        """
        payment = self.find_payment(payment_id)
        if payment is None:
            raise NotFound("Payment not found")

        target = _parse(PaymentStatus, new_status, "status")
        previous = payment.status
        if previous == target.value and (transaction_id is None or transaction_id == payment.transaction_id):
            return False

        now = datetime.now(UTC)
        payment.status = target.value
        if transaction_id is not None:
            payment.transaction_id = transaction_id
        payment.updated_at = now
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=self.id,
                payment_id=payment.id,
                previous_status=previous,
                new_status=target.value,
                transaction_id=payment.transaction_id,
                changed_at=now,
            )
        )
        return True
