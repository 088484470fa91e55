"""Homepage section actions."""

from typing import Any

from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.shared.payloads import CamelModel
from commerce.store.store import Store


class TogglePayload(CamelModel):
    section_type: str
    visible: bool


class ReorderPayload(CamelModel):
    order: list[str]


class ConfigPayload(CamelModel):
    section_type: str
    config: dict[str, Any]


def _apply(tenant_id, change) -> list[dict]:
    repo = current_domain.repository_for(Store)
    store = repo.get_for_tenant(tenant_id)
    change(store)
    repo.add(store)
    return store.section_list()


@action_handler("section.toggle", payload=TogglePayload)
def toggle(tenant_id, payload: TogglePayload):
    return _apply(tenant_id, lambda store: store.toggle_section(payload.section_type, payload.visible))


@action_handler("section.reorder", payload=ReorderPayload)
def reorder(tenant_id, payload: ReorderPayload):
    return _apply(tenant_id, lambda store: store.reorder_sections(payload.order))


@action_handler("section.update_config", payload=ConfigPayload)
def update_config(tenant_id, payload: ConfigPayload):
    return _apply(tenant_id, lambda store: store.update_section_config(payload.section_type, payload.config))
