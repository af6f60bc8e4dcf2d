"""FastAPI application factory.

Every request runs inside the storefront domain context and carries a
request id in its log context.
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from protean.domain import Domain

from storefront.api import addresses, cart, catalogue, checkout, orders, payments, shipping
from storefront.api.errors import register_error_handlers
from storefront.utils.logging import add_context, clear_context


def create_app(domain: Domain) -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description="Catalogue, cart, addresses, shipping methods, checkout, orders and payments",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context and a fresh log context per request."""
        clear_context()
        add_context(request_id=request.headers.get("x-request-id") or uuid4().hex, path=request.url.path)
        with domain.domain_context():
            response = await call_next(request)
        return response

    register_error_handlers(app)

    app.include_router(catalogue.category_router)
    app.include_router(catalogue.product_router)
    app.include_router(cart.router)
    app.include_router(addresses.router)
    app.include_router(shipping.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(checkout.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "domain": domain.name}

    return app
