"""Product actions."""

import json
from typing import Literal

from protean import atomic_change
from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.catalogue.category import Category
from commerce.catalogue.membership import CollectionProduct, ProductCategory
from commerce.catalogue.product import Product, ProductStatus
from commerce.config import setting
from commerce.exceptions import ValidationFailed
from commerce.shared.money import round_currency
from commerce.shared.payloads import CamelModel, slugify
from commerce.sink.envelope import publish_event


class CreateProductPayload(CamelModel):
    name: str
    price: float
    description: str | None = None
    compare_at_price: float | None = None
    category_id: str | None = None
    tags: list[str] = []
    status: ProductStatus = ProductStatus.DRAFT
    hsn_code: str | None = None
    gst_rate: float | None = None


class UpdateProductPayload(CamelModel):
    product_id: str
    name: str | None = None
    description: str | None = None
    price: float | None = None
    compare_at_price: float | None = None
    category_id: str | None = None
    tags: list[str] | None = None
    hsn_code: str | None = None
    gst_rate: float | None = None


class ProductRefPayload(CamelModel):
    product_id: str


class BulkPricePayload(CamelModel):
    adjustment_type: Literal["percentage", "flat"]
    adjustment_value: float
    filter_by_category: str | None = None
    filter_by_tags: list[str] | None = None


class BulkPublishPayload(CamelModel):
    product_ids: list[str]


def _product_event(event_type, product: Product):
    publish_event(event_type, product.tenant_id, product.to_summary(), source="catalogue")


def _set_status(tenant_id, product_id, status: ProductStatus) -> dict:
    repo = current_domain.repository_for(Product)
    product = repo.get_for_tenant(tenant_id, product_id)
    product.status = status.value
    product.touch()
    repo.add(product)
    _product_event("product.updated", product)
    return product.to_summary()


@action_handler("product.create", payload=CreateProductPayload)
def create(tenant_id, payload: CreateProductPayload):
    if payload.category_id:
        current_domain.repository_for(Category).get_for_tenant(tenant_id, payload.category_id)

    product = Product(
        tenant_id=tenant_id,
        name=payload.name,
        slug=slugify(payload.name),
        description=payload.description,
        price=payload.price,
        compare_at_price=payload.compare_at_price,
        category_id=payload.category_id,
        tags=json.dumps(payload.tags),
        status=payload.status.value,
        hsn_code=payload.hsn_code,
        gst_rate=payload.gst_rate,
    )
    current_domain.repository_for(Product).add(product)

    if payload.category_id:
        current_domain.repository_for(ProductCategory).add(
            ProductCategory(
                tenant_id=tenant_id,
                product_id=str(product.id),
                category_id=payload.category_id,
                is_primary=True,
            )
        )

    _product_event("product.created", product)
    return product.to_summary()


@action_handler("product.update", payload=UpdateProductPayload)
def update(tenant_id, payload: UpdateProductPayload):
    repo = current_domain.repository_for(Product)
    product = repo.get_for_tenant(tenant_id, payload.product_id)

    changes = payload.changes()
    changes.pop("product_id")
    if "tags" in changes:
        changes["tags"] = json.dumps(changes["tags"] or [])

    price = changes.get("price", product.price)
    compare_at = changes.get("compare_at_price", product.compare_at_price)
    if compare_at is not None and compare_at <= price:
        raise ValidationFailed("Compare-at price must be higher than the selling price.", field="compare_at_price")

    with atomic_change(product):
        for field_name, value in changes.items():
            setattr(product, field_name, value)
    product.touch()
    repo.add(product)

    _product_event("product.updated", product)
    return product.to_summary()


@action_handler("product.delete", payload=ProductRefPayload)
def delete(tenant_id, payload: ProductRefPayload):
    repo = current_domain.repository_for(Product)
    product = repo.get_for_tenant(tenant_id, payload.product_id)

    memberships = current_domain.repository_for(ProductCategory)
    for record in memberships.for_product(tenant_id, product.id):
        memberships.remove(record)

    collection_links = current_domain.repository_for(CollectionProduct)
    for record in collection_links.for_product(tenant_id, product.id):
        collection_links.remove(record)

    summary = product.to_summary()
    repo.remove(product)
    publish_event("product.deleted", tenant_id, summary, source="catalogue")
    return {"deleted": True, "productId": summary["id"]}


@action_handler("product.publish", payload=ProductRefPayload)
def publish(tenant_id, payload: ProductRefPayload):
    return _set_status(tenant_id, payload.product_id, ProductStatus.ACTIVE)


@action_handler("product.archive", payload=ProductRefPayload)
def archive(tenant_id, payload: ProductRefPayload):
    return _set_status(tenant_id, payload.product_id, ProductStatus.ARCHIVED)


@action_handler("product.bulk_update_price", payload=BulkPricePayload)
def bulk_update_price(tenant_id, payload: BulkPricePayload):
    """Reprice the tenant's products, skipping any that would drop to zero or exceed the price ceiling."""
    if payload.adjustment_type == "percentage" and payload.adjustment_value <= -100:
        raise ValidationFailed("Can't reduce prices by 100% or more. Try a smaller percentage.", field="adjustmentValue")

    repo = current_domain.repository_for(Product)
    products = repo.list_for_tenant(tenant_id)

    if payload.filter_by_category:
        products = [p for p in products if str(p.category_id) == payload.filter_by_category]
    if payload.filter_by_tags:
        wanted = set(payload.filter_by_tags)
        products = [p for p in products if wanted & set(p.tag_list)]

    max_price = setting("MAX_PRODUCT_PRICE")
    updated = 0
    for product in products:
        if payload.adjustment_type == "percentage":
            new_price = round_currency(product.price * (1 + payload.adjustment_value / 100))
        else:
            new_price = round_currency(product.price + payload.adjustment_value)

        if new_price <= 0 or new_price > max_price:
            continue
        with atomic_change(product):
            product.price = new_price
            if product.compare_at_price is not None and product.compare_at_price <= new_price:
                product.compare_at_price = None
        product.touch()
        repo.add(product)
        updated += 1

    return {"updated": updated, "total": len(products)}


@action_handler("product.bulk_publish", payload=BulkPublishPayload)
def bulk_publish(tenant_id, payload: BulkPublishPayload):
    """Publish the listed drafts; unknown ids and non-drafts are skipped."""
    repo = current_domain.repository_for(Product)
    wanted = set(payload.product_ids)
    published = 0
    for product in repo.list_for_tenant(tenant_id, status=ProductStatus.DRAFT.value):
        if str(product.id) not in wanted:
            continue
        product.status = ProductStatus.ACTIVE.value
        product.touch()
        repo.add(product)
        _product_event("product.updated", product)
        published += 1
    return {"published": published}
