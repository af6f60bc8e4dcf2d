"""FastAPI routes for payments recorded against orders."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, current_principal
from storefront.api.schemas import CreatePaymentRequest, PaymentListItem, PaymentResponse
from storefront.order.payment import RecordPayment
from storefront.order.queries import load_order, payment_summary
from storefront.order.queries import list_payments as visible_payments

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("", status_code=201, response_model=PaymentResponse)
async def record_payment(
    body: CreatePaymentRequest, principal: Principal = Depends(current_principal)
) -> PaymentResponse:
    # Only the order's owner or an admin may record a payment against it
    load_order(body.order_id, principal.user_id, is_admin=principal.is_admin)

    payment_id = current_domain.process(RecordPayment(**body.model_dump()), asynchronous=False)
    order = load_order(body.order_id, principal.user_id, is_admin=principal.is_admin)
    return PaymentResponse(**payment_summary(order.find_payment(payment_id)))


@router.get("", response_model=list[PaymentListItem])
async def list_payments(
    order_id: str | None = None, principal: Principal = Depends(current_principal)
) -> list[PaymentListItem]:
    return [PaymentListItem(**p) for p in visible_payments(principal.user_id, principal.is_admin, order_id=order_id)]
