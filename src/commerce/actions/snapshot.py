"""Builds the read-only store snapshot handed to validators."""

from collections import Counter
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from commerce.actions.models import OrderSummary, ProductSummary, StoreSnapshot
from commerce.catalogue.category import Category
from commerce.catalogue.collection import Collection
from commerce.catalogue.product import Product
from commerce.exceptions import NotFound
from commerce.ordering.service import OrderService
from commerce.shared.periods import as_aware
from commerce.store.store import Store


def build_snapshot(tenant_id, limit: int = 10) -> StoreSnapshot:
    try:
        store_name = current_domain.repository_for(Store).get_for_tenant(tenant_id).name
    except NotFound:
        store_name = None

    products = current_domain.repository_for(Product).list_for_tenant(tenant_id)
    products.sort(key=lambda p: as_aware(p.created_at) or datetime.min.replace(tzinfo=UTC), reverse=True)

    service = OrderService()
    orders = service.list_orders(tenant_id, limit=limit)

    return StoreSnapshot(
        tenant_id=str(tenant_id),
        store_name=store_name,
        product_count=len(products),
        products_by_status=dict(Counter(p.status for p in products)),
        pending_orders=service.pending_count(tenant_id),
        recent_products=[
            ProductSummary(id=str(p.id), name=p.name, price=p.price, status=p.status, tags=p.tag_list)
            for p in products[:limit]
        ],
        recent_orders=[
            OrderSummary(
                id=str(o.id),
                order_number=o.order_number,
                status=o.status,
                total=o.total,
                buyer_name=o.buyer_name,
            )
            for o in orders
        ],
        categories=[c.to_summary() for c in current_domain.repository_for(Category).list_for_tenant(tenant_id)],
        collections=[c.to_summary() for c in current_domain.repository_for(Collection).list_for_tenant(tenant_id)],
    )
