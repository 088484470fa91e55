"""Read-only query actions."""

from datetime import UTC, datetime

from protean.utils.globals import current_domain

from commerce.actions.handlers.discounts import summary as discount_summary
from commerce.actions.registry import action_handler
from commerce.catalogue.category import Category
from commerce.catalogue.collection import Collection
from commerce.catalogue.membership import ProductCategory
from commerce.catalogue.product import Product
from commerce.config import setting
from commerce.ordering.service import OrderService
from commerce.pricing.discount import Discount
from commerce.shared.payloads import CamelModel
from commerce.shared.periods import as_aware
from commerce.store.store import Store


class ProductQuery(CamelModel):
    status: str | None = None
    category_id: str | None = None
    search: str | None = None
    tags: list[str] | None = None
    min_price: float | None = None
    max_price: float | None = None
    limit: int | None = None


class OrderQuery(CamelModel):
    status: str | None = None
    period: str | None = None
    limit: int | None = None


class RevenueQuery(CamelModel):
    period: str = "today"


class CollectionQuery(CamelModel):
    featured: bool | None = None


class DiscountQuery(CamelModel):
    active_only: bool = True


def _newest_first(records):
    return sorted(records, key=lambda r: as_aware(r.created_at) or datetime.min.replace(tzinfo=UTC), reverse=True)


@action_handler("query.products", payload=ProductQuery)
def query_products(tenant_id, payload: ProductQuery):
    filters = {"status": payload.status} if payload.status else {}
    products = current_domain.repository_for(Product).list_for_tenant(tenant_id, **filters)

    if payload.category_id:
        linked = {
            str(record.product_id)
            for record in current_domain.repository_for(ProductCategory).for_category(tenant_id, payload.category_id)
        }
        products = [p for p in products if str(p.id) in linked or str(p.category_id) == payload.category_id]
    if payload.search:
        needle = payload.search.lower()
        products = [p for p in products if needle in p.name.lower()]
    if payload.tags:
        wanted = set(payload.tags)
        products = [p for p in products if wanted & set(p.tag_list)]
    if payload.min_price is not None:
        products = [p for p in products if p.price >= payload.min_price]
    if payload.max_price is not None:
        products = [p for p in products if p.price <= payload.max_price]

    limit = payload.limit or setting("QUERY_DEFAULT_LIMIT")
    return [p.to_summary() for p in _newest_first(products)[:limit]]


@action_handler("query.orders", payload=OrderQuery)
def query_orders(tenant_id, payload: OrderQuery):
    orders = OrderService().list_orders(
        tenant_id,
        status=payload.status,
        period=payload.period,
        limit=payload.limit or setting("QUERY_DEFAULT_LIMIT"),
    )
    return [
        {
            "id": str(order.id),
            "orderNumber": order.order_number,
            "status": order.status,
            "total": order.total,
            "buyerName": order.buyer_name,
            "buyerPhone": order.buyer_phone,
            "paymentMethod": order.payment_method,
            "createdAt": order.created_at.isoformat() if order.created_at else None,
        }
        for order in orders
    ]


@action_handler("query.revenue", payload=RevenueQuery)
def query_revenue(tenant_id, payload: RevenueQuery):
    return OrderService().revenue_summary(tenant_id, payload.period)


@action_handler("query.categories")
def query_categories(tenant_id, payload: dict):
    categories = current_domain.repository_for(Category).list_for_tenant(tenant_id)
    return [category.to_summary() for category in sorted(categories, key=lambda c: (c.sort_order or 0, c.name))]


@action_handler("query.collections", payload=CollectionQuery)
def query_collections(tenant_id, payload: CollectionQuery):
    collections = current_domain.repository_for(Collection).list_for_tenant(tenant_id)
    if payload.featured is not None:
        collections = [c for c in collections if bool(c.is_featured) == payload.featured]
    return [collection.to_summary() for collection in sorted(collections, key=lambda c: (c.sort_order or 0, c.name))]


@action_handler("query.store_info")
def query_store_info(tenant_id, payload: dict):
    store = current_domain.repository_for(Store).get_for_tenant(tenant_id)
    return {
        "tenantId": str(store.tenant_id),
        "name": store.name,
        "slug": store.slug,
        "status": store.status,
        "description": store.description,
        "gstin": store.gstin,
        "businessState": store.business_state,
    }


@action_handler("query.store_link")
def query_store_link(tenant_id, payload: dict):
    store = current_domain.repository_for(Store).get_for_tenant(tenant_id)
    base_url = str(setting("STOREFRONT_BASE_URL")).rstrip("/")
    return {"name": store.name, "slug": store.slug, "url": f"{base_url}/{store.slug}"}


@action_handler("query.discounts", payload=DiscountQuery)
def query_discounts(tenant_id, payload: DiscountQuery):
    filters = {"is_active": True} if payload.active_only else {}
    discounts = current_domain.repository_for(Discount).list_for_tenant(tenant_id, **filters)
    return [discount_summary(discount) for discount in _newest_first(discounts)]
