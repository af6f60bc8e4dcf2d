"""FastAPI routes for shipping methods. Reads are public, writes admin-only."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, admin_principal
from storefront.api.presenters import shipping_method_response
from storefront.api.schemas import (
    CreateShippingMethodRequest,
    ShippingMethodResponse,
    StatusResponse,
    UpdateShippingMethodRequest,
)
from storefront.shipping.management import (
    CreateShippingMethod,
    DeleteShippingMethod,
    UpdateShippingMethod,
    get_shipping_method,
    list_shipping_methods,
)

router = APIRouter(prefix="/api/shipping-methods", tags=["shipping-methods"])


@router.get("", response_model=list[ShippingMethodResponse])
async def browse_shipping_methods(active_only: bool = False) -> list[ShippingMethodResponse]:
    return [shipping_method_response(m) for m in list_shipping_methods(active_only=active_only)]


@router.get("/{shipping_method_id}", response_model=ShippingMethodResponse)
async def read_shipping_method(shipping_method_id: str) -> ShippingMethodResponse:
    return shipping_method_response(get_shipping_method(shipping_method_id))


@router.post("", status_code=201, response_model=ShippingMethodResponse)
async def create_shipping_method(
    body: CreateShippingMethodRequest, _: Principal = Depends(admin_principal)
) -> ShippingMethodResponse:
    method_id = current_domain.process(CreateShippingMethod(**body.model_dump()), asynchronous=False)
    return shipping_method_response(get_shipping_method(method_id))


@router.patch("/{shipping_method_id}", response_model=ShippingMethodResponse)
async def update_shipping_method(
    shipping_method_id: str, body: UpdateShippingMethodRequest, _: Principal = Depends(admin_principal)
) -> ShippingMethodResponse:
    command = UpdateShippingMethod(shipping_method_id=shipping_method_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return shipping_method_response(get_shipping_method(shipping_method_id))


@router.delete("/{shipping_method_id}", response_model=StatusResponse)
async def delete_shipping_method(shipping_method_id: str, _: Principal = Depends(admin_principal)) -> StatusResponse:
    current_domain.process(DeleteShippingMethod(shipping_method_id=shipping_method_id), asynchronous=False)
    return StatusResponse()
