"""Category aggregate: a node of a tenant's browse tree."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String, Text

from commerce.domain import commerce
from commerce.shared.tenancy import TenantScopedRepository


@commerce.aggregate
class Category:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    slug = String(max_length=150)
    description = Text()
    parent_id = Identifier()
    image_url = String(max_length=1000)
    default_hsn_code = String(max_length=20)
    sort_order = Integer(default=0)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "parentId": str(self.parent_id) if self.parent_id else None,
            "imageUrl": self.image_url,
        }


@commerce.repository(part_of=Category)
class CategoryRepository(TenantScopedRepository):
    entity_label = "Category"

    def children_of(self, tenant_id, parent_id) -> list[Category]:
        return self.list_for_tenant(tenant_id, parent_id=str(parent_id))
