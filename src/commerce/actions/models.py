"""Action contracts.

An action is an ephemeral ``{type, payload}`` request proposed by the
conversational layer; it is never persisted. Each executed action yields
one ``ActionResult``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from commerce.shared.payloads import CamelModel


class Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    payload: dict[str, Any] = Field(default_factory=dict)

    def with_payload(self, payload: dict) -> "Action":
        return Action(type=self.type, payload=payload)


class ActionResult(BaseModel):
    action: Action
    success: bool
    data: Any = None
    error: str | None = None


class ValidationResult(BaseModel):
    """Outcome of pre-validating one action.

    ``fixed`` holds a corrected action to execute instead of the original;
    ``error`` is set when the action must not execute at all.
    """

    valid: bool
    fixed: Action | None = None
    error: str | None = None
    notes: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def corrected(cls, action: Action, notes: list[str] | None = None) -> "ValidationResult":
        return cls(valid=True, fixed=action, notes=notes or [])

    @classmethod
    def rejected(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


class ProductSummary(CamelModel):
    id: str
    name: str
    price: float
    status: str
    tags: list[str] = Field(default_factory=list)


class OrderSummary(CamelModel):
    id: str
    order_number: str
    status: str
    total: float
    buyer_name: str | None = None


class StoreSnapshot(CamelModel):
    """Read-only view of recent store state used to pre-validate actions.

    It may be stale; the executor always re-reads the store.
    """

    tenant_id: str | None = None
    store_name: str | None = None
    product_count: int = 0
    products_by_status: dict[str, int] = Field(default_factory=dict)
    pending_orders: int = 0
    recent_products: list[ProductSummary] = Field(default_factory=list)
    recent_orders: list[OrderSummary] = Field(default_factory=list)
    categories: list[dict[str, Any]] = Field(default_factory=list)
    collections: list[dict[str, Any]] = Field(default_factory=list)

    def find_order(self, order_id) -> OrderSummary | None:
        return next((order for order in self.recent_orders if order.id == str(order_id)), None)
