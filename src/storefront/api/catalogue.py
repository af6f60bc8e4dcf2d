"""FastAPI routes for the catalogue: categories and products."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, admin_principal
from storefront.api.presenters import category_node_response, category_response, product_response
from storefront.api.schemas import (
    AddVariantRequest,
    CategoryNodeResponse,
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    IdResponse,
    ProductResponse,
    SetStockRequest,
    StatusResponse,
    UpdatePricingRequest,
)
from storefront.catalogue.management import AddVariant, CreateCategory, CreateProduct, SetStock, UpdatePricing
from storefront.catalogue.queries import category_tree, get_category, get_product, list_products

category_router = APIRouter(prefix="/api/categories", tags=["categories"])
product_router = APIRouter(prefix="/api/products", tags=["products"])


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
@category_router.get("", response_model=list[CategoryNodeResponse])
async def list_categories() -> list[CategoryNodeResponse]:
    return [category_node_response(node) for node in category_tree()]


@category_router.get("/{category_id}", response_model=CategoryResponse)
async def read_category(category_id: str) -> CategoryResponse:
    return category_response(get_category(category_id))


@category_router.post("", status_code=201, response_model=IdResponse)
async def create_category(body: CreateCategoryRequest, _: Principal = Depends(admin_principal)) -> IdResponse:
    command = CreateCategory(
        name=body.name,
        slug=body.slug,
        parent_id=body.parent_id,
        description=body.description,
        display_order=body.display_order,
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@product_router.get("", response_model=list[ProductResponse])
async def browse_products(
    category_id: str | None = None,
    search: str | None = None,
    on_sale: bool = False,
    in_stock: bool = False,
) -> list[ProductResponse]:
    products = list_products(category_id=category_id, search=search, on_sale=on_sale, in_stock=in_stock)
    return [product_response(p) for p in products]


@product_router.get("/{id_or_slug}", response_model=ProductResponse)
async def read_product(id_or_slug: str) -> ProductResponse:
    return product_response(get_product(id_or_slug))


@product_router.post("", status_code=201, response_model=IdResponse)
async def create_product(body: CreateProductRequest, _: Principal = Depends(admin_principal)) -> IdResponse:
    command = CreateProduct(**body.model_dump())
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@product_router.post("/{product_id}/variants", status_code=201, response_model=IdResponse)
async def add_variant(
    product_id: str, body: AddVariantRequest, _: Principal = Depends(admin_principal)
) -> IdResponse:
    command = AddVariant(product_id=product_id, **body.model_dump())
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@product_router.put("/{product_id}/stock", response_model=StatusResponse)
async def set_stock(product_id: str, body: SetStockRequest, _: Principal = Depends(admin_principal)) -> StatusResponse:
    current_domain.process(
        SetStock(product_id=product_id, quantity=body.quantity, variant_id=body.variant_id),
        asynchronous=False,
    )
    return StatusResponse()


@product_router.patch("/{product_id}/pricing", response_model=StatusResponse)
async def update_pricing(
    product_id: str, body: UpdatePricingRequest, _: Principal = Depends(admin_principal)
) -> StatusResponse:
    current_domain.process(UpdatePricing(product_id=product_id, **body.model_dump()), asynchronous=False)
    return StatusResponse()
