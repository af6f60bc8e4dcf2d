"""FastAPI routes for the current user's cart."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, current_principal
from storefront.api.presenters import cart_response
from storefront.api.schemas import (
    AddToCartRequest,
    CartResponse,
    SelectShippingMethodRequest,
    UpdateCartItemRequest,
)
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, SelectShippingMethod, UpdateCartQuantity

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _current_cart(principal: Principal) -> CartResponse:
    return cart_response(current_domain.repository_for(ShoppingCart).for_user(principal.user_id))


@router.get("", response_model=CartResponse)
async def read_cart(principal: Principal = Depends(current_principal)) -> CartResponse:
    return _current_cart(principal)


@router.post("", status_code=201, response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, principal: Principal = Depends(current_principal)) -> CartResponse:
    command = AddToCart(
        user_id=principal.user_id,
        product_id=body.product_id,
        size=body.size,
        color=body.color,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _current_cart(principal)


@router.patch("/items", response_model=CartResponse)
async def update_cart_item(
    body: UpdateCartItemRequest, principal: Principal = Depends(current_principal)
) -> CartResponse:
    command = UpdateCartQuantity(
        user_id=principal.user_id,
        product_id=body.product_id,
        size=body.size,
        color=body.color,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _current_cart(principal)


@router.delete("/items", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    size: str | None = None,
    color: str | None = None,
    principal: Principal = Depends(current_principal),
) -> CartResponse:
    command = RemoveFromCart(user_id=principal.user_id, product_id=product_id, size=size, color=color)
    current_domain.process(command, asynchronous=False)
    return _current_cart(principal)


@router.delete("", response_model=CartResponse)
async def clear_cart(principal: Principal = Depends(current_principal)) -> CartResponse:
    current_domain.process(ClearCart(user_id=principal.user_id), asynchronous=False)
    return _current_cart(principal)


@router.put("/shipping-method", response_model=CartResponse)
async def select_shipping_method(
    body: SelectShippingMethodRequest, principal: Principal = Depends(current_principal)
) -> CartResponse:
    command = SelectShippingMethod(user_id=principal.user_id, shipping_method_id=body.shipping_method_id)
    current_domain.process(command, asynchronous=False)
    return _current_cart(principal)
