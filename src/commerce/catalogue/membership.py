"""Join records linking products to categories and collections."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, Integer

from commerce.domain import commerce
from commerce.shared.tenancy import TenantScopedRepository


@commerce.aggregate
class ProductCategory:
    tenant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    category_id = Identifier(required=True)
    is_primary = Boolean(default=False)


@commerce.aggregate
class CollectionProduct:
    tenant_id = Identifier(required=True)
    collection_id = Identifier(required=True)
    product_id = Identifier(required=True)
    position = Integer(default=0)
    added_at = DateTime(default=lambda: datetime.now(UTC))


@commerce.repository(part_of=ProductCategory)
class ProductCategoryRepository(TenantScopedRepository):
    entity_label = "Product category"

    def for_product(self, tenant_id, product_id) -> list[ProductCategory]:
        return self.list_for_tenant(tenant_id, product_id=str(product_id))

    def for_category(self, tenant_id, category_id) -> list[ProductCategory]:
        return self.list_for_tenant(tenant_id, category_id=str(category_id))


@commerce.repository(part_of=CollectionProduct)
class CollectionProductRepository(TenantScopedRepository):
    entity_label = "Collection product"

    def for_collection(self, tenant_id, collection_id) -> list[CollectionProduct]:
        return self.list_for_tenant(tenant_id, collection_id=str(collection_id))

    def for_product(self, tenant_id, product_id) -> list[CollectionProduct]:
        return self.list_for_tenant(tenant_id, product_id=str(product_id))
