"""FastAPI routes for stores, actions, orders, stock and discounts."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from commerce.actions.executor import execute_actions, run_actions
from commerce.actions.snapshot import build_snapshot
from commerce.api.schemas import (
    ActionBatchRequest,
    ActionBatchResponse,
    AdjustStockRequest,
    DiscountQuoteResponse,
    OpenStoreRequest,
    OrderPlacedResponse,
    OrderStatusResponse,
    PlaceOrderRequest,
    StockQuantityRequest,
    TenantIdResponse,
    UpdateOrderStatusRequest,
    ValidateDiscountRequest,
    VariantStockResponse,
)
from commerce.inventory.commands import AdjustStock, CommitReservation, ReleaseStock, ReserveStock
from commerce.ordering.commands import PlaceOrder, UpdateOrderStatus
from commerce.pricing.engine import validate_discount_code
from commerce.store.commands import OpenStore
from commerce.store.store import Store

store_router = APIRouter(prefix="/stores", tags=["stores"])


def _stock_response(result: dict) -> VariantStockResponse:
    return VariantStockResponse(
        variant_id=str(result["id"]),
        stock=result["stock"],
        reserved=result["reserved"],
        available=result["stock"] - result["reserved"],
    )


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------
@store_router.post("", status_code=201, response_model=TenantIdResponse)
async def open_store(body: OpenStoreRequest) -> TenantIdResponse:
    command = OpenStore(**body.model_dump(exclude_none=True))
    tenant_id = current_domain.process(command, asynchronous=False)
    return TenantIdResponse(tenant_id=tenant_id)


@store_router.get("/{tenant_id}")
async def get_store(tenant_id: str) -> dict:
    return current_domain.repository_for(Store).get_for_tenant(tenant_id).to_summary()


@store_router.get("/{tenant_id}/snapshot")
async def get_snapshot(tenant_id: str) -> dict:
    return build_snapshot(tenant_id).model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------
@store_router.post("/{tenant_id}/actions", response_model=ActionBatchResponse)
async def submit_actions(tenant_id: str, body: ActionBatchRequest) -> ActionBatchResponse:
    if body.validate_first:
        results = run_actions(tenant_id, body.actions, body.snapshot or build_snapshot(tenant_id))
    else:
        results = execute_actions(tenant_id, body.actions)
    return ActionBatchResponse(results=results)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@store_router.post("/{tenant_id}/orders", status_code=201, response_model=OrderPlacedResponse)
async def place_order(tenant_id: str, body: PlaceOrderRequest) -> OrderPlacedResponse:
    command = PlaceOrder(
        tenant_id=tenant_id,
        buyer_phone=body.buyer_phone,
        buyer_name=body.buyer_name,
        buyer_email=body.buyer_email,
        line_items=json.dumps([item.model_dump() for item in body.line_items]),
        shipping_address=body.shipping_address.model_dump_json() if body.shipping_address else None,
        billing_address=body.billing_address.model_dump_json() if body.billing_address else None,
        payment_method=body.payment_method,
        discount_code=body.discount_code,
        tax_amount=body.tax_amount,
        shipping_cost=body.shipping_cost,
        apply_gst=body.apply_gst,
        seller_state=body.seller_state,
        notes=body.notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderPlacedResponse(**result)


@store_router.put("/{tenant_id}/orders/{order_id}/status", response_model=OrderStatusResponse)
async def update_order_status(tenant_id: str, order_id: str, body: UpdateOrderStatusRequest) -> OrderStatusResponse:
    command = UpdateOrderStatus(tenant_id=tenant_id, order_id=order_id, **body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(**result)


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------
@store_router.put("/{tenant_id}/variants/{variant_id}/stock", response_model=VariantStockResponse)
async def adjust_stock(tenant_id: str, variant_id: str, body: AdjustStockRequest) -> VariantStockResponse:
    command = AdjustStock(tenant_id=tenant_id, variant_id=variant_id, adjustment=body.adjustment, reason=body.reason)
    return _stock_response(current_domain.process(command, asynchronous=False))


@store_router.post("/{tenant_id}/variants/{variant_id}/reserve", response_model=VariantStockResponse)
async def reserve_stock(tenant_id: str, variant_id: str, body: StockQuantityRequest) -> VariantStockResponse:
    command = ReserveStock(tenant_id=tenant_id, variant_id=variant_id, quantity=body.quantity)
    return _stock_response(current_domain.process(command, asynchronous=False))


@store_router.post("/{tenant_id}/variants/{variant_id}/release", response_model=VariantStockResponse)
async def release_stock(tenant_id: str, variant_id: str, body: StockQuantityRequest) -> VariantStockResponse:
    command = ReleaseStock(tenant_id=tenant_id, variant_id=variant_id, quantity=body.quantity)
    return _stock_response(current_domain.process(command, asynchronous=False))


@store_router.post("/{tenant_id}/variants/{variant_id}/commit", response_model=VariantStockResponse)
async def commit_reservation(tenant_id: str, variant_id: str, body: StockQuantityRequest) -> VariantStockResponse:
    command = CommitReservation(tenant_id=tenant_id, variant_id=variant_id, quantity=body.quantity)
    return _stock_response(current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------
@store_router.post("/{tenant_id}/discounts/validate", response_model=DiscountQuoteResponse)
async def validate_discount(tenant_id: str, body: ValidateDiscountRequest) -> DiscountQuoteResponse:
    quote = validate_discount_code(tenant_id, body.code, body.order_total)
    return DiscountQuoteResponse(
        valid=quote.valid,
        discount_amount=quote.discount_amount,
        message=quote.message,
        discount_id=quote.discount_id,
        code=quote.code,
    )
