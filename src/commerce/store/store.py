"""Store aggregate: one storefront per tenant.

The store carries the tenant's identity (name, slug, status, copy), the
typed design tokens of its storefront and the ordered list of homepage
sections.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String, Text, ValueObject
from protean.utils.reflection import declared_fields
from pydantic.alias_generators import to_camel, to_snake

from commerce.domain import commerce
from commerce.exceptions import NotFound, ValidationFailed
from commerce.store.design import (
    DESIGN_GROUPS,
    DESIGN_SCALARS,
    Animation,
    CheckoutStyle,
    CollectionStyle,
    Fonts,
    HeroStyle,
    ImageStyle,
    Layout,
    NavStyle,
    Palette,
    ProductCardStyle,
    Radius,
    Spacing,
)
from commerce.shared.payloads import slugify
from commerce.store.events import StoreDesignUpdated, StoreDetailsUpdated, StoreSectionsUpdated


class StoreStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"


DEFAULT_SECTIONS = ["hero", "featured_products", "categories", "collections", "testimonials", "about", "whatsapp_cta"]

_DETAIL_FIELDS = ("name", "description", "status", "hero_tagline", "hero_subtext", "store_bio", "whatsapp_number")


def _group_patch(group: str, patch: dict) -> dict:
    """Translate a camelCase group patch into value object field names."""
    patch = dict(patch)
    if group == "collection" and isinstance(patch.get("columns"), dict):
        columns = patch.pop("columns")
        if "mobile" in columns:
            patch["mobileColumns"] = columns["mobile"]
        if "desktop" in columns:
            patch["desktopColumns"] = columns["desktop"]
    return {to_snake(key): value for key, value in patch.items()}


def _group_document(group: str, values: dict) -> dict:
    document = {to_camel(key): value for key, value in values.items()}
    if group == "collection":
        document["columns"] = {
            "mobile": document.pop("mobileColumns", None),
            "desktop": document.pop("desktopColumns", None),
        }
    return document


@commerce.aggregate
class Store:
    tenant_id = Identifier(identifier=True)
    name = String(required=True, max_length=100)
    slug = String(required=True, max_length=120)
    description = Text()
    status = String(choices=StoreStatus, default=StoreStatus.DRAFT.value)
    hero_tagline = String(max_length=200)
    hero_subtext = String(max_length=500)
    store_bio = Text()
    whatsapp_number = String(max_length=20)
    gstin = String(max_length=15)
    business_state = String(max_length=100)

    palette = ValueObject(Palette)
    fonts = ValueObject(Fonts)
    hero = ValueObject(HeroStyle)
    product_card = ValueObject(ProductCardStyle)
    nav = ValueObject(NavStyle)
    collection = ValueObject(CollectionStyle)
    checkout = ValueObject(CheckoutStyle)
    layout = String(choices=Layout, default=Layout.STANDARD.value)
    spacing = String(choices=Spacing, default=Spacing.COMFORTABLE.value)
    radius = String(choices=Radius, default=Radius.MEDIUM.value)
    image_style = String(choices=ImageStyle, default=ImageStyle.NATURAL.value)
    animation = String(choices=Animation, default=Animation.SUBTLE.value)

    sections = Text()  # JSON: list of {type, visible, config}
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open(cls, tenant_id, name, slug=None, **details):
        """Create a store with default design tokens and sections."""
        now = datetime.now(UTC)
        return cls(
            tenant_id=str(tenant_id),
            name=name,
            slug=slug or slugify(name),
            palette=Palette(),
            fonts=Fonts(),
            hero=HeroStyle(),
            product_card=ProductCardStyle(),
            nav=NavStyle(),
            collection=CollectionStyle(),
            checkout=CheckoutStyle(),
            sections=json.dumps([{"type": kind, "visible": True, "config": {}} for kind in DEFAULT_SECTIONS]),
            created_at=now,
            updated_at=now,
            **details,
        )

    # -------------------------------------------------------------------
    # Identity and copy
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        unknown = set(changes) - set(_DETAIL_FIELDS)
        if unknown:
            raise ValidationFailed(f"Unknown store fields: {', '.join(sorted(unknown))}")
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationFailed("Store name cannot be empty", field="name")

        for field_name, value in changes.items():
            setattr(self, field_name, value)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StoreDetailsUpdated(
                tenant_id=str(self.tenant_id),
                changes=json.dumps(changes),
                updated_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Design tokens
    # -------------------------------------------------------------------
    def update_design(self, changes: dict):
        """Apply a camelCase design patch.

        Group values (``palette``, ``hero``...) are merged field by field over
        the current group; scalar tokens (``layout``, ``radius``...) are
        replaced. Every group is rebuilt before any is assigned, so an
        invalid patch leaves the store untouched.
        """
        unknown = set(changes) - set(DESIGN_GROUPS) - set(DESIGN_SCALARS)
        if unknown:
            raise ValidationFailed(f"Unknown design tokens: {', '.join(sorted(unknown))}", field="design")

        staged = {}
        for group, patch in changes.items():
            if group in DESIGN_GROUPS:
                attribute, vo_class = DESIGN_GROUPS[group]
                if not isinstance(patch, dict):
                    raise ValidationFailed(f"Design group {group} must be an object", field=group)
                current = (getattr(self, attribute) or vo_class()).to_dict()
                group_patch = _group_patch(group, patch)
                stray = set(group_patch) - set(declared_fields(vo_class))
                if stray:
                    raise ValidationFailed(f"Unknown {group} tokens: {', '.join(sorted(stray))}", field=group)
                merged = {**current, **group_patch}
                staged[attribute] = vo_class(**merged)
            else:
                attribute, choices = DESIGN_SCALARS[group]
                allowed = [choice.value for choice in choices]
                if patch not in allowed:
                    raise ValidationFailed(f"{group} must be one of: {', '.join(allowed)}", field=group)
                staged[attribute] = patch

        for attribute, value in staged.items():
            setattr(self, attribute, value)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StoreDesignUpdated(
                tenant_id=str(self.tenant_id),
                groups=",".join(changes),
                updated_at=self.updated_at,
            )
        )

    def design_tokens(self) -> dict:
        """The full design document, camelCase, as the storefront reads it."""
        document = {}
        for group, (attribute, vo_class) in DESIGN_GROUPS.items():
            value = getattr(self, attribute) or vo_class()
            document[group] = _group_document(group, value.to_dict())
        for token, (attribute, _) in DESIGN_SCALARS.items():
            document[token] = getattr(self, attribute)
        return document

    # -------------------------------------------------------------------
    # Homepage sections
    # -------------------------------------------------------------------
    def section_list(self) -> list[dict]:
        return json.loads(self.sections) if self.sections else []

    def _find_section(self, sections, section_type):
        for section in sections:
            if section["type"] == section_type:
                return section
        raise NotFound("Section", section_type)

    def _save_sections(self, sections):
        self.sections = json.dumps(sections)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StoreSectionsUpdated(
                tenant_id=str(self.tenant_id),
                sections=self.sections,
                updated_at=self.updated_at,
            )
        )

    def toggle_section(self, section_type: str, visible: bool):
        sections = self.section_list()
        self._find_section(sections, section_type)["visible"] = bool(visible)
        self._save_sections(sections)

    def reorder_sections(self, order: list[str]):
        """Listed sections first, in the given order; the rest keep their order."""
        sections = self.section_list()
        by_type = {section["type"]: section for section in sections}
        missing = [section_type for section_type in order if section_type not in by_type]
        if missing:
            raise ValidationFailed(f"Unknown sections: {', '.join(missing)}", field="order")

        reordered = [by_type[section_type] for section_type in dict.fromkeys(order)]
        reordered += [section for section in sections if section["type"] not in order]
        self._save_sections(reordered)

    def update_section_config(self, section_type: str, config: dict):
        sections = self.section_list()
        section = self._find_section(sections, section_type)
        section["config"] = {**section.get("config", {}), **config}
        self._save_sections(sections)

    def to_summary(self) -> dict:
        return {
            "tenantId": str(self.tenant_id),
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "status": self.status,
            "heroTagline": self.hero_tagline,
            "heroSubtext": self.hero_subtext,
            "storeBio": self.store_bio,
            "design": self.design_tokens(),
            "sections": self.section_list(),
        }


@commerce.repository(part_of=Store)
class StoreRepository:
    def get_for_tenant(self, tenant_id) -> Store:
        try:
            return self.get(str(tenant_id))
        except ObjectNotFoundError:
            raise NotFound("Store", tenant_id) from None
