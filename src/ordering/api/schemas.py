"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field

from ordering.order.order import PaymentMethod


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    line1: str = Field(..., max_length=255)
    line2: str | None = Field(None, max_length=255)
    city: str = Field(..., max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str = Field(..., max_length=100)


# ---------------------------------------------------------------------------
# Product Schemas
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: float = Field(ge=0)
    stock: int = Field(ge=0, default=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    stock: int
    is_active: bool


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-001", "quantity": 2}]}}

    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class CartLineResponse(BaseModel):
    product_id: str
    name: str | None = None
    unit_price: float | None = None
    quantity: int
    line_total: float | None = None


class CartResponse(BaseModel):
    items: list[CartLineResponse] = []
    item_count: int = 0
    subtotal: float = 0.0


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payment_method": "cod",
                    "shipping_address": {
                        "line1": "12 Harbour Road",
                        "city": "Portland",
                        "state": "OR",
                        "postal_code": "97201",
                        "country": "US",
                    },
                    "tax": 8.0,
                    "shipping": 5.0,
                }
            ]
        }
    }

    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    shipping_address: AddressSchema
    tax: float = Field(ge=0, default=0.0)
    shipping: float = Field(ge=0, default=0.0)
    notes: str | None = None


class TransitionStatusRequest(BaseModel):
    status: str


class OrderIdResponse(BaseModel):
    order_id: str


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class StatusResponse(BaseModel):
    status: str = "ok"
