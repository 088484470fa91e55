"""Collection actions."""

import json
from typing import Any

from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.catalogue.collection import Collection, CollectionType
from commerce.catalogue.membership import CollectionProduct
from commerce.catalogue.product import Product
from commerce.shared.payloads import CamelModel, slugify


class CreateCollectionPayload(CamelModel):
    name: str
    type: CollectionType = CollectionType.MANUAL
    description: str | None = None
    banner_image_url: str | None = None
    rules: dict[str, Any] | list[Any] | None = None
    sort_order: int = 0
    is_featured: bool = False


class UpdateCollectionPayload(CamelModel):
    collection_id: str
    name: str | None = None
    description: str | None = None
    banner_image_url: str | None = None
    rules: dict[str, Any] | list[Any] | None = None
    sort_order: int | None = None
    is_featured: bool | None = None


class CollectionRefPayload(CamelModel):
    collection_id: str


class MembershipPayload(CamelModel):
    collection_id: str
    product_ids: list[str]


def _refresh_count(tenant_id, collection: Collection):
    links = current_domain.repository_for(CollectionProduct).for_collection(tenant_id, collection.id)
    collection.product_count = len(links)
    current_domain.repository_for(Collection).add(collection)


@action_handler("collection.create", payload=CreateCollectionPayload)
def create(tenant_id, payload: CreateCollectionPayload):
    collection = Collection(
        tenant_id=tenant_id,
        name=payload.name,
        slug=slugify(payload.name, suffix=False),
        type=payload.type.value,
        description=payload.description,
        banner_image_url=payload.banner_image_url,
        rules=json.dumps(payload.rules) if payload.rules is not None else None,
        sort_order=payload.sort_order,
        is_featured=payload.is_featured,
    )
    current_domain.repository_for(Collection).add(collection)
    return collection.to_summary()


@action_handler("collection.update", payload=UpdateCollectionPayload)
def update(tenant_id, payload: UpdateCollectionPayload):
    repo = current_domain.repository_for(Collection)
    collection = repo.get_for_tenant(tenant_id, payload.collection_id)

    changes = payload.changes()
    changes.pop("collection_id")
    if "rules" in changes:
        changes["rules"] = json.dumps(changes["rules"]) if changes["rules"] is not None else None

    for field_name, value in changes.items():
        setattr(collection, field_name, value)
    if "name" in changes:
        collection.slug = slugify(collection.name, suffix=False)
    repo.add(collection)
    return collection.to_summary()


@action_handler("collection.delete", payload=CollectionRefPayload)
def delete(tenant_id, payload: CollectionRefPayload):
    repo = current_domain.repository_for(Collection)
    collection = repo.get_for_tenant(tenant_id, payload.collection_id)

    links = current_domain.repository_for(CollectionProduct)
    for record in links.for_collection(tenant_id, collection.id):
        links.remove(record)

    repo.remove(collection)
    return {"deleted": True, "collectionId": payload.collection_id}


@action_handler("collection.add_products", payload=MembershipPayload)
def add_products(tenant_id, payload: MembershipPayload):
    """Append products to a collection; products already in it keep their place."""
    collection = current_domain.repository_for(Collection).get_for_tenant(tenant_id, payload.collection_id)
    products = current_domain.repository_for(Product)
    for product_id in payload.product_ids:
        products.get_for_tenant(tenant_id, product_id)

    links = current_domain.repository_for(CollectionProduct)
    existing = {str(link.product_id): link for link in links.for_collection(tenant_id, collection.id)}
    position = max((link.position for link in existing.values()), default=-1) + 1

    added = 0
    for product_id in dict.fromkeys(payload.product_ids):
        if product_id in existing:
            continue
        links.add(
            CollectionProduct(
                tenant_id=tenant_id,
                collection_id=str(collection.id),
                product_id=product_id,
                position=position,
            )
        )
        position += 1
        added += 1

    _refresh_count(tenant_id, collection)
    return {"added": added, "productCount": collection.product_count}


@action_handler("collection.remove_products", payload=MembershipPayload)
def remove_products(tenant_id, payload: MembershipPayload):
    collection = current_domain.repository_for(Collection).get_for_tenant(tenant_id, payload.collection_id)

    links = current_domain.repository_for(CollectionProduct)
    wanted = set(payload.product_ids)
    removed = 0
    for link in links.for_collection(tenant_id, collection.id):
        if str(link.product_id) in wanted:
            links.remove(link)
            removed += 1

    _refresh_count(tenant_id, collection)
    return {"removed": removed, "productCount": collection.product_count}
