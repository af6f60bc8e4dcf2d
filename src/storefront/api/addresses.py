"""FastAPI routes for the current user's address book."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, current_principal
from storefront.api.presenters import address_response
from storefront.api.schemas import AddressRequest, AddressResponse, StatusResponse, UpdateAddressRequest
from storefront.config import get_settings
from storefront.customer.addresses import (
    AddAddress,
    RemoveAddress,
    SetDefaultAddress,
    UpdateAddress,
    address_for,
    addresses_for,
)

router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@router.get("", response_model=list[AddressResponse])
async def list_addresses(principal: Principal = Depends(current_principal)) -> list[AddressResponse]:
    return [address_response(a) for a in addresses_for(principal.user_id)]


@router.post("", status_code=201, response_model=AddressResponse)
async def add_address(body: AddressRequest, principal: Principal = Depends(current_principal)) -> AddressResponse:
    fields = body.model_dump()
    fields["country"] = fields["country"] or get_settings().default_country
    address_id = current_domain.process(AddAddress(user_id=principal.user_id, **fields), asynchronous=False)
    return address_response(address_for(principal.user_id, address_id))


@router.patch("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str, body: UpdateAddressRequest, principal: Principal = Depends(current_principal)
) -> AddressResponse:
    command = UpdateAddress(user_id=principal.user_id, address_id=address_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return address_response(address_for(principal.user_id, address_id))


@router.delete("/{address_id}", response_model=StatusResponse)
async def remove_address(address_id: str, principal: Principal = Depends(current_principal)) -> StatusResponse:
    current_domain.process(RemoveAddress(user_id=principal.user_id, address_id=address_id), asynchronous=False)
    return StatusResponse()


@router.put("/{address_id}/default", response_model=AddressResponse)
async def set_default_address(address_id: str, principal: Principal = Depends(current_principal)) -> AddressResponse:
    current_domain.process(SetDefaultAddress(user_id=principal.user_id, address_id=address_id), asynchronous=False)
    return address_response(address_for(principal.user_id, address_id))
