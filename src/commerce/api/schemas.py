"""Pydantic request/response schemas for the commerce API.

These are external contracts (anti-corruption layer), separate from the
internal protean commands.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from commerce.actions.models import Action, ActionResult, StoreSnapshot


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
class OpenStoreRequest(BaseModel):
    tenant_id: str
    name: str = Field(min_length=1, max_length=100)
    slug: str | None = None
    description: str | None = None
    whatsapp_number: str | None = None
    gstin: str | None = None
    business_state: str | None = None


class TenantIdResponse(BaseModel):
    tenant_id: str


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------
class ActionBatchRequest(BaseModel):
    actions: list[Action]
    snapshot: StoreSnapshot | None = None
    validate_first: bool = Field(default=True, alias="validate")

    model_config = ConfigDict(populate_by_name=True)


class ActionBatchResponse(BaseModel):
    results: list[ActionResult]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class LineItemSchema(BaseModel):
    product_id: str
    variant_id: str | None = None
    name: str
    sku: str | None = None
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    hsn_code: str | None = None
    gst_rate: float | None = Field(default=None, ge=0, le=28)
    attributes: dict[str, Any] | None = None


class AddressSchema(BaseModel):
    line1: str
    line2: str | None = None
    city: str
    state: str
    pincode: str
    country: str = "IN"


class PlaceOrderRequest(BaseModel):
    buyer_phone: str
    buyer_name: str | None = None
    buyer_email: str | None = None
    line_items: list[LineItemSchema] = Field(min_length=1)
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    payment_method: str = "cod"
    discount_code: str | None = None
    tax_amount: float = Field(default=0.0, ge=0)
    shipping_cost: float = Field(default=0.0, ge=0)
    apply_gst: bool = False
    seller_state: str | None = None
    notes: str | None = None


class OrderPlacedResponse(BaseModel):
    order_id: str
    order_number: str
    total: float


class UpdateOrderStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = None
    tracking_url: str | None = None
    awb_number: str | None = None
    payment_status: str | None = None
    payment_reference: str | None = None
    cancellation_reason: str | None = None
    notes: str | None = None


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str
    fulfillment_status: str


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------
class AdjustStockRequest(BaseModel):
    adjustment: int
    reason: str | None = None


class StockQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class VariantStockResponse(BaseModel):
    variant_id: str
    stock: int
    reserved: int
    available: int


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------
class ValidateDiscountRequest(BaseModel):
    code: str
    order_total: float = Field(ge=0)


class DiscountQuoteResponse(BaseModel):
    valid: bool
    discount_amount: float
    message: str
    discount_id: str | None = None
    code: str | None = None
