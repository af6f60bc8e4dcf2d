"""Admin status changes for orders and their payments."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    transaction_id = String(max_length=255)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        if order.change_status(command.status):
            repo.add(order)
            logger.info("order_status_changed", order_id=str(order.id), previous=previous, status=order.status)
        else:
            logger.debug("order_status_unchanged", order_id=str(order.id), status=order.status)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.change_payment_status(command.payment_id, command.status, transaction_id=command.transaction_id):
            repo.add(order)
            logger.info(
                "payment_status_changed",
                order_id=str(order.id),
                payment_id=str(command.payment_id),
                status=command.status,
            )
