"""FastAPI routes for orders: placement, reads and the admin status console."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, current_principal
from storefront.api.schemas import CreateOrderRequest, OrderListResponse, OrderResponse, UpdateOrderRequest
from storefront.config import get_settings
from storefront.exceptions import BadRequest, Forbidden
from storefront.order.placement import PlaceOrder
from storefront.order.queries import get_order, list_orders, load_order
from storefront.order.status import UpdateOrderStatus, UpdatePaymentStatus
from storefront.utils.logging import add_context

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", status_code=201, response_model=OrderResponse)
def create_order(body: CreateOrderRequest, principal: Principal = Depends(current_principal)) -> OrderResponse:
    items = None
    if body.items is not None:
        items = json.dumps([item.model_dump() for item in body.items])

    command = PlaceOrder(
        user_id=principal.user_id,
        shipping_address_id=body.shipping_address_id,
        shipping_method_id=body.shipping_method_id,
        items=items,
        subtotal=body.subtotal,
        tax=body.tax,
        shipping=body.shipping,
        total=body.total,
    )
    order_id = current_domain.process(command, asynchronous=False)
    add_context(order_id=order_id)
    return OrderResponse(**get_order(order_id, principal.user_id, is_admin=principal.is_admin))


@router.get("", response_model=OrderListResponse)
async def browse_orders(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    user_id: str | None = None,
    principal: Principal = Depends(current_principal),
) -> OrderListResponse:
    settings = get_settings()
    limit = min(limit or settings.default_page_size, settings.max_page_size)
    orders, pagination = list_orders(
        principal.user_id,
        is_admin=principal.is_admin,
        page=page,
        limit=limit,
        filter_user_id=user_id,
    )
    return OrderListResponse(orders=orders, pagination=pagination)


@router.get("/{order_id}", response_model=OrderResponse)
async def read_order(order_id: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    return OrderResponse(**get_order(order_id, principal.user_id, is_admin=principal.is_admin))


@router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str, body: UpdateOrderRequest, principal: Principal = Depends(current_principal)
) -> OrderResponse:
    if not principal.is_admin:
        raise Forbidden()

    if body.status is None and body.payment_status is None:
        raise BadRequest("Nothing to update: provide status or payment_status")
    if body.payment_status is not None and not body.payment_id:
        raise BadRequest("payment_id is required to update a payment status")

    load_order(order_id, principal.user_id, is_admin=True)
    add_context(order_id=order_id)
    if body.status is not None:
        current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    if body.payment_status is not None:
        current_domain.process(
            UpdatePaymentStatus(
                order_id=order_id,
                payment_id=body.payment_id,
                status=body.payment_status,
                transaction_id=body.transaction_id,
            ),
            asynchronous=False,
        )

    return OrderResponse(**get_order(order_id, principal.user_id, is_admin=True))
