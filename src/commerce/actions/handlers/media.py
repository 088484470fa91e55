"""Media attachment actions."""

import json

from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.catalogue.category import Category
from commerce.catalogue.collection import Collection
from commerce.catalogue.media import MediaAsset
from commerce.catalogue.product import Product
from commerce.shared.payloads import CamelModel
from commerce.store.store import Store


class HeroBannerPayload(CamelModel):
    media_asset_id: str


class ProductImagesPayload(CamelModel):
    product_id: str
    media_asset_ids: list[str]


class CategoryImagePayload(CamelModel):
    category_id: str
    media_asset_id: str


class CollectionBannerPayload(CamelModel):
    collection_id: str
    media_asset_id: str


def _asset(tenant_id, asset_id) -> MediaAsset:
    return current_domain.repository_for(MediaAsset).get_for_tenant(tenant_id, asset_id)


@action_handler("media.set_hero_banner", payload=HeroBannerPayload)
def set_hero_banner(tenant_id, payload: HeroBannerPayload):
    asset = _asset(tenant_id, payload.media_asset_id)

    repo = current_domain.repository_for(Store)
    store = repo.get_for_tenant(tenant_id)
    store.update_design({"hero": {"backgroundImage": asset.hero_url or asset.original_url}})
    repo.add(store)
    return store.design_tokens()["hero"]


@action_handler("media.set_product_images", payload=ProductImagesPayload)
def set_product_images(tenant_id, payload: ProductImagesPayload):
    """Replace the product's images, in the order given."""
    repo = current_domain.repository_for(Product)
    product = repo.get_for_tenant(tenant_id, payload.product_id)

    images = []
    for position, asset_id in enumerate(payload.media_asset_ids):
        image = _asset(tenant_id, asset_id).image_dict(position)
        image["alt"] = image["alt"] or product.name
        images.append(image)

    product.images = json.dumps(images)
    product.touch()
    repo.add(product)
    return {"productId": str(product.id), "images": images}


@action_handler("media.set_category_image", payload=CategoryImagePayload)
def set_category_image(tenant_id, payload: CategoryImagePayload):
    asset = _asset(tenant_id, payload.media_asset_id)

    repo = current_domain.repository_for(Category)
    category = repo.get_for_tenant(tenant_id, payload.category_id)
    category.image_url = asset.card_url or asset.original_url
    repo.add(category)
    return category.to_summary()


@action_handler("media.set_collection_banner", payload=CollectionBannerPayload)
def set_collection_banner(tenant_id, payload: CollectionBannerPayload):
    asset = _asset(tenant_id, payload.media_asset_id)

    repo = current_domain.repository_for(Collection)
    collection = repo.get_for_tenant(tenant_id, payload.collection_id)
    collection.banner_image_url = asset.hero_url or asset.original_url
    repo.add(collection)
    return {**collection.to_summary(), "bannerImageUrl": collection.banner_image_url}
