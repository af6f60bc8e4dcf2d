"""Shipping method administration: commands, handler and reads."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import Conflict, NotFound
from storefront.order.order import Order
from storefront.shipping.method import ShippingMethod
from storefront.utils.logging import get_logger
from storefront.utils.queries import find_all

logger = get_logger(__name__)

_UPDATABLE = (
    "name",
    "name_localized",
    "description",
    "description_localized",
    "cost",
    "estimated_days",
    "active",
    "display_order",
)


@storefront.command(part_of="ShippingMethod")
class CreateShippingMethod:
    name = String(required=True, max_length=100)
    name_localized = String(required=True, max_length=100)
    cost = Float(required=True, min_value=0.0)
    description = Text()
    description_localized = Text()
    estimated_days = String(max_length=50)
    active = Boolean(default=True)
    display_order = Integer(default=0)


@storefront.command(part_of="ShippingMethod")
class UpdateShippingMethod:
    shipping_method_id = Identifier(required=True)
    name = String(max_length=100)
    name_localized = String(max_length=100)
    cost = Float(min_value=0.0)
    description = Text()
    description_localized = Text()
    estimated_days = String(max_length=50)
    active = Boolean()
    display_order = Integer()


@storefront.command(part_of="ShippingMethod")
class DeleteShippingMethod:
    shipping_method_id = Identifier(required=True)


def get_shipping_method(shipping_method_id):
    try:
        return current_domain.repository_for(ShippingMethod).get(shipping_method_id)
    except ObjectNotFoundError:
        raise NotFound("Shipping method not found") from None


def list_shipping_methods(active_only=False):
    """Shipping methods, newest first."""
    methods = find_all(ShippingMethod, active=True) if active_only else find_all(ShippingMethod)
    return sorted(methods, key=lambda m: m.created_at, reverse=True)


@storefront.command_handler(part_of=ShippingMethod)
class ManageShippingMethodsHandler:
    @handle(CreateShippingMethod)
    def create_shipping_method(self, command):
        method = ShippingMethod.create(
            name=command.name,
            name_localized=command.name_localized,
            cost=command.cost,
            description=command.description,
            description_localized=command.description_localized,
            estimated_days=command.estimated_days,
            active=command.active if command.active is not None else True,
            display_order=command.display_order or 0,
        )
        current_domain.repository_for(ShippingMethod).add(method)
        logger.info("shipping_method_created", shipping_method_id=str(method.id), cost=method.cost)
        return str(method.id)

    @handle(UpdateShippingMethod)
    def update_shipping_method(self, command):
        method = get_shipping_method(command.shipping_method_id)
        changes = {f: getattr(command, f) for f in _UPDATABLE if getattr(command, f, None) is not None}
        method.update(**changes)
        current_domain.repository_for(ShippingMethod).add(method)

    @handle(DeleteShippingMethod)
    def delete_shipping_method(self, command):
        method = get_shipping_method(command.shipping_method_id)

        referencing = find_all(Order, shipping_method_id=str(method.id))
        if referencing:
            raise Conflict(
                "Shipping method is used by existing orders and cannot be deleted",
                order_count=len(referencing),
            )

        current_domain.repository_for(ShippingMethod)._dao.delete(method)
        logger.info("shipping_method_deleted", shipping_method_id=str(method.id))
