"""FastAPI routes for checkout: totals preview and order submission."""

from fastapi import APIRouter, Depends

from storefront.api.auth import Principal, current_principal
from storefront.api.presenters import cart_response, shipping_method_response
from storefront.api.schemas import CheckoutRequest, CheckoutResponse, CheckoutSummaryResponse, OrderResponse
from storefront.checkout.orchestration import CardDetails, CheckoutForm, checkout_summary, run_checkout
from storefront.order.queries import get_order

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.get("/summary", response_model=CheckoutSummaryResponse)
async def summary(
    shipping_method_id: str | None = None, principal: Principal = Depends(current_principal)
) -> CheckoutSummaryResponse:
    result = checkout_summary(principal.user_id, shipping_method_id=shipping_method_id)
    selected = result["selected_shipping_method"]
    return CheckoutSummaryResponse(
        cart=cart_response(result["cart"]),
        shipping_methods=[shipping_method_response(m) for m in result["shipping_methods"]],
        selected_shipping_method=shipping_method_response(selected) if selected else None,
        totals=result["totals"],
        currency=result["currency"],
    )


@router.post("", status_code=201, response_model=CheckoutResponse)
def submit_checkout(body: CheckoutRequest, principal: Principal = Depends(current_principal)) -> CheckoutResponse:
    fields = body.model_dump(exclude={"card"})
    card = CardDetails(**body.card.model_dump()) if body.card else None
    result = run_checkout(principal.user_id, CheckoutForm(card=card, **fields))

    return CheckoutResponse(
        order=OrderResponse(**get_order(result.order_id, principal.user_id)),
        payment_recorded=result.payment_recorded,
        payment_status=result.payment_status,
    )
