"""Store identity and design actions."""

from typing import Any

from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.shared.payloads import CamelModel
from commerce.store.store import Store, StoreStatus


class NamePayload(CamelModel):
    name: str


class DescriptionPayload(CamelModel):
    description: str


class StatusPayload(CamelModel):
    status: StoreStatus


class HeroTextPayload(CamelModel):
    hero_tagline: str | None = None
    hero_subtext: str | None = None


class BioPayload(CamelModel):
    store_bio: str


class DesignBulkPayload(CamelModel):
    design: dict[str, Any]


def _update_details(tenant_id, **changes) -> dict:
    repo = current_domain.repository_for(Store)
    store = repo.get_for_tenant(tenant_id)
    store.update_details(**changes)
    repo.add(store)
    return store.to_summary()


def _update_design(tenant_id, changes: dict) -> dict:
    repo = current_domain.repository_for(Store)
    store = repo.get_for_tenant(tenant_id)
    store.update_design(changes)
    repo.add(store)
    return store.design_tokens()


@action_handler("store.update_name", payload=NamePayload)
def update_name(tenant_id, payload: NamePayload):
    return _update_details(tenant_id, name=payload.name)


@action_handler("store.update_description", payload=DescriptionPayload)
def update_description(tenant_id, payload: DescriptionPayload):
    return _update_details(tenant_id, description=payload.description)


@action_handler("store.update_status", payload=StatusPayload)
def update_status(tenant_id, payload: StatusPayload):
    return _update_details(tenant_id, status=payload.status.value)


@action_handler("store.update_hero_text", payload=HeroTextPayload)
def update_hero_text(tenant_id, payload: HeroTextPayload):
    return _update_details(tenant_id, **payload.changes())


@action_handler("store.update_bio", payload=BioPayload)
def update_bio(tenant_id, payload: BioPayload):
    return _update_details(tenant_id, store_bio=payload.store_bio)


def _design_group_handler(action_type: str, key: str):
    """Register a handler that applies ``payload[key]`` as one design token."""

    def handler(tenant_id, payload: dict):
        return _update_design(tenant_id, {key: payload.get(key)})

    handler.__name__ = f"update_{key}"
    return action_handler(action_type)(handler)


for _action_type, _key in (
    ("store.update_palette", "palette"),
    ("store.update_fonts", "fonts"),
    ("store.update_hero_style", "hero"),
    ("store.update_product_card_style", "productCard"),
    ("store.update_nav_style", "nav"),
    ("store.update_collection_style", "collection"),
    ("store.update_checkout_style", "checkout"),
    ("store.update_layout", "layout"),
    ("store.update_spacing", "spacing"),
    ("store.update_radius", "radius"),
    ("store.update_image_style", "imageStyle"),
    ("store.update_animation", "animation"),
):
    _design_group_handler(_action_type, _key)


@action_handler("store.update_design_bulk", payload=DesignBulkPayload)
def update_design_bulk(tenant_id, payload: DesignBulkPayload):
    return _update_design(tenant_id, payload.design)
