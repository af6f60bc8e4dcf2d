"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the Protean commands they
are translated into.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

OrderStatusValue = Literal["PENDING", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED"]
PaymentStatusValue = Literal["PENDING", "COMPLETED", "FAILED", "REFUNDED"]
PaymentMethodValue = Literal["card", "cash", "online"]


class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CreateCategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=120)
    parent_id: str | None = None
    description: str | None = None
    display_order: int = 0


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    parent_id: str | None = None
    display_order: int = 0
    is_active: bool = True


class CategoryNodeResponse(CategoryResponse):
    children: list["CategoryNodeResponse"] = []


class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    price: float = Field(gt=0)
    category_id: str | None = None
    description: str | None = None
    original_price: float | None = Field(default=None, ge=0)
    discount: float = Field(default=0.0, ge=0, le=100)
    quantity: int = Field(default=0, ge=0)
    brand: str | None = None
    material: str | None = None
    is_active: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Linen shirt",
                    "slug": "linen-shirt",
                    "price": 3490.0,
                    "discount": 10,
                    "quantity": 25,
                }
            ]
        }
    }


class AddVariantRequest(BaseModel):
    size: str | None = None
    color: str | None = None
    quantity: int = Field(default=0, ge=0)
    sku: str | None = None
    price: float | None = Field(default=None, gt=0)


class SetStockRequest(BaseModel):
    quantity: int = Field(ge=0)
    variant_id: str | None = None


class UpdatePricingRequest(BaseModel):
    price: float | None = Field(default=None, gt=0)
    discount: float | None = Field(default=None, ge=0, le=100)
    original_price: float | None = Field(default=None, ge=0)


class VariantResponse(BaseModel):
    id: str
    size: str | None = None
    color: str | None = None
    sku: str | None = None
    quantity: int = 0
    price: float | None = None


class ProductResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    category_id: str | None = None
    price: float
    original_price: float | None = None
    discount: float = 0.0
    final_price: float
    quantity: int = 0
    brand: str | None = None
    material: str | None = None
    is_active: bool = True
    variants: list[VariantResponse] = []


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    size: str | None = None
    color: str | None = None
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(BaseModel):
    product_id: str
    size: str | None = None
    color: str | None = None
    quantity: int


class SelectShippingMethodRequest(BaseModel):
    shipping_method_id: str | None = None


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str | None = None
    name: str
    size: str | None = None
    color: str | None = None
    quantity: int
    price: float
    discount: float = 0.0
    unit_price: float
    line_total: float
    stock: int


class CartResponse(BaseModel):
    items: list[CartLineResponse] = []
    item_count: int = 0
    total: float = 0.0
    selected_shipping_method_id: str | None = None


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
class AddressRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    company: str | None = None
    address1: str = Field(min_length=1, max_length=255)
    address2: str | None = None
    city: str = Field(min_length=1, max_length=100)
    state: str | None = None
    postal_code: str = Field(min_length=1, max_length=20)
    country: str | None = None
    phone: str | None = None
    is_default: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "first_name": "Anna",
                    "last_name": "Petrova",
                    "address1": "Tverskaya 7",
                    "city": "Moscow",
                    "postal_code": "125009",
                    "country": "RU",
                    "is_default": True,
                }
            ]
        }
    }


class UpdateAddressRequest(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    phone: str | None = None
    is_default: bool | None = None


class AddressResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    company: str | None = None
    address1: str
    address2: str | None = None
    city: str
    state: str | None = None
    postal_code: str
    country: str
    phone: str | None = None
    is_default: bool


# ---------------------------------------------------------------------------
# Shipping methods
# ---------------------------------------------------------------------------
class CreateShippingMethodRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    name_localized: str = Field(min_length=1, max_length=100)
    cost: float = Field(ge=0)
    description: str | None = None
    description_localized: str | None = None
    estimated_days: str | None = None
    active: bool = True
    display_order: int = 0


class UpdateShippingMethodRequest(BaseModel):
    name: str | None = None
    name_localized: str | None = None
    cost: float | None = Field(default=None, ge=0)
    description: str | None = None
    description_localized: str | None = None
    estimated_days: str | None = None
    active: bool | None = None
    display_order: int | None = None


class ShippingMethodResponse(BaseModel):
    id: str
    name: str
    name_localized: str
    description: str | None = None
    description_localized: str | None = None
    cost: float
    estimated_days: str | None = None
    active: bool
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int | float
    price: float | None = None
    variant_id: str | None = None
    size: str | None = None
    color: str | None = None


class CreateOrderRequest(BaseModel):
    shipping_address_id: str | None = None
    shipping_method_id: str | None = None
    items: list[OrderItemRequest] | None = None
    subtotal: float | None = None
    tax: float | None = None
    shipping: float | None = None
    total: float | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address_id": "addr-001",
                    "shipping_method_id": "ship-001",
                    "items": [{"product_id": "prod-001", "quantity": 2, "price": 1000.0}],
                }
            ]
        }
    }


class UpdateOrderRequest(BaseModel):
    status: OrderStatusValue | None = None
    payment_id: str | None = None
    payment_status: PaymentStatusValue | None = None
    transaction_id: str | None = None


class CategorySummary(BaseModel):
    id: str
    name: str
    slug: str


class ProductSummary(BaseModel):
    id: str
    name: str
    slug: str
    price: float
    discount: float | None = None
    category: CategorySummary | None = None


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str | None = None
    name: str | None = None
    size: str | None = None
    color: str | None = None
    quantity: int
    price: float
    product: ProductSummary | None = None


class ShippingAddressResponse(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    phone: str | None = None


class ShippingMethodSummary(BaseModel):
    id: str
    name: str
    name_localized: str
    cost: float
    estimated_days: str | None = None


class PaymentResponse(BaseModel):
    id: str
    amount: float
    status: str
    payment_method: str
    transaction_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PaymentListItem(PaymentResponse):
    order_id: str
    order_number: str


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    subtotal: float
    tax: float
    shipping: float
    total: float
    currency: str | None = None
    shipping_address_id: str
    shipping_address: ShippingAddressResponse | None = None
    shipping_method_id: str | None = None
    shipping_method: ShippingMethodSummary | None = None
    items: list[OrderItemResponse] = []
    payments: list[PaymentResponse] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: PaginationResponse


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CreatePaymentRequest(BaseModel):
    order_id: str
    amount: float = Field(ge=0)
    payment_method: str = "card"
    status: PaymentStatusValue = "PENDING"
    transaction_id: str | None = None


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CardDetailsRequest(BaseModel):
    number: str | None = None
    expiry: str | None = None
    cvv: str | None = None


class CheckoutRequest(BaseModel):
    payment_method: PaymentMethodValue = "card"
    shipping_address_id: str | None = None
    shipping_method_id: str | None = None
    full_name: str | None = None
    phone: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    card: CardDetailsRequest | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payment_method": "card",
                    "full_name": "Anna Petrova",
                    "phone": "+7 900 000-00-00",
                    "address1": "Tverskaya 7",
                    "city": "Moscow",
                    "postal_code": "125009",
                    "card": {"number": "4242424242424242", "expiry": "12/29", "cvv": "123"},
                }
            ]
        }
    }


class TotalsResponse(BaseModel):
    subtotal: float
    shipping: float
    tax: float
    total: float


class CheckoutSummaryResponse(BaseModel):
    cart: CartResponse
    shipping_methods: list[ShippingMethodResponse]
    selected_shipping_method: ShippingMethodResponse | None = None
    totals: TotalsResponse
    currency: str


class CheckoutResponse(BaseModel):
    order: OrderResponse
    payment_recorded: bool
    payment_status: str | None = None
