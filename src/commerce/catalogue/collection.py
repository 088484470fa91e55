"""Collection aggregate: a curated or rule-based group of products."""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from commerce.domain import commerce
from commerce.shared.tenancy import TenantScopedRepository


class CollectionType(Enum):
    MANUAL = "manual"
    SMART = "smart"


@commerce.aggregate
class Collection:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    slug = String(max_length=150)
    type = String(choices=CollectionType, default=CollectionType.MANUAL.value)
    description = Text()
    banner_image_url = String(max_length=1000)
    rules = Text()  # JSON: smart collection rules
    sort_order = Integer(default=0)
    is_featured = Boolean(default=False)
    product_count = Integer(default=0, min_value=0)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "type": self.type,
            "isFeatured": self.is_featured,
            "productCount": self.product_count,
            "rules": json.loads(self.rules) if self.rules else None,
        }


@commerce.repository(part_of=Collection)
class CollectionRepository(TenantScopedRepository):
    entity_label = "Collection"
