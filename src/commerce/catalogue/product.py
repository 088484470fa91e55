"""Product aggregate: a sellable item in a tenant's catalogue."""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text

from commerce.config import setting
from commerce.domain import commerce
from commerce.shared.money import format_inr
from commerce.shared.tenancy import TenantScopedRepository


class ProductStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


@commerce.aggregate
class Product:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    slug = String(max_length=300)
    description = Text()
    price = Float(required=True, min_value=0.0)
    compare_at_price = Float(min_value=0.0)
    category_id = Identifier()
    tags = Text()  # JSON: list of strings
    images = Text()  # JSON: list of image dicts
    status = String(choices=ProductStatus, default=ProductStatus.DRAFT.value)
    hsn_code = String(max_length=20)
    gst_rate = Float(min_value=0.0, max_value=28.0)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    updated_at = DateTime()

    @invariant.post
    def price_must_be_positive_and_capped(self):
        max_price = setting("MAX_PRODUCT_PRICE")
        if self.price is None or self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than ₹0."]})
        if self.price > max_price:
            raise ValidationError({"price": [f"Price can't exceed ₹{format_inr(max_price)}."]})

    @invariant.post
    def compare_at_price_must_exceed_price(self):
        if self.compare_at_price is not None and self.compare_at_price <= self.price:
            raise ValidationError({"compare_at_price": ["Compare-at price must be higher than the selling price."]})

    @property
    def tag_list(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    @property
    def image_list(self) -> list[dict]:
        return json.loads(self.images) if self.images else []

    def touch(self):
        self.updated_at = datetime.now(UTC)

    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "price": self.price,
            "compareAtPrice": self.compare_at_price,
            "status": self.status,
            "categoryId": str(self.category_id) if self.category_id else None,
            "tags": self.tag_list,
        }


@commerce.repository(part_of=Product)
class ProductRepository(TenantScopedRepository):
    entity_label = "Product"
