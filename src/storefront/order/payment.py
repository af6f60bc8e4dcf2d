"""Recording payments against an order."""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, PaymentStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class RecordPayment:
    order_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    payment_method = String(default="card", max_length=30)
    status = String(default=PaymentStatus.PENDING.value, max_length=20)
    transaction_id = String(max_length=255)


@storefront.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPayment)
    def record_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        payment = order.record_payment(
            amount=command.amount,
            payment_method=command.payment_method or "card",
            status=command.status or PaymentStatus.PENDING.value,
            transaction_id=command.transaction_id,
        )
        repo.add(order)

        logger.info(
            "payment_recorded",
            order_id=str(order.id),
            payment_id=str(payment.id),
            amount=payment.amount,
            status=payment.status,
        )
        return str(payment.id)
