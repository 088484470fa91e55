"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance drives its own storefront. State tracks IDs
returned by the API so follow-up operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class StoreState:
    """Tracks state for a single simulated storefront."""

    tenant_id: str | None = None
    product_id: str | None = None
    variant_id: str | None = None
    unit_price: float = 0.0
    discount_code: str | None = None
    order_ids: list[str] = field(default_factory=list)
