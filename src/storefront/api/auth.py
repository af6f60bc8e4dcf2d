"""Caller identity as asserted by the upstream authentication layer.

Sessions are issued elsewhere; requests reach this service with the
authenticated user's id and role in headers.
"""

from dataclasses import dataclass

from fastapi import Depends, Header

from storefront.exceptions import Forbidden, Unauthorized
from storefront.utils.logging import add_context

ADMIN_ROLE = "ADMIN"


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = "USER"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


async def current_principal(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default="USER"),
) -> Principal:
    if not x_user_id.strip():
        raise Unauthorized()
    principal = Principal(user_id=x_user_id.strip(), role=(x_user_role or "USER").strip().upper())
    add_context(user_id=principal.user_id)
    return principal


async def admin_principal(principal: Principal = Depends(current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden()
    return principal
