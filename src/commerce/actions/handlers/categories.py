"""Category actions."""

from protean.utils.globals import current_domain

from commerce.actions.registry import action_handler
from commerce.catalogue.category import Category
from commerce.catalogue.membership import ProductCategory
from commerce.catalogue.product import Product
from commerce.exceptions import ValidationFailed
from commerce.shared.payloads import CamelModel, slugify


class CreateCategoryPayload(CamelModel):
    name: str
    description: str | None = None
    parent_id: str | None = None
    image_url: str | None = None
    default_hsn_code: str | None = None
    sort_order: int = 0


class UpdateCategoryPayload(CamelModel):
    category_id: str
    name: str | None = None
    description: str | None = None
    parent_id: str | None = None
    image_url: str | None = None
    default_hsn_code: str | None = None
    sort_order: int | None = None


class CategoryRefPayload(CamelModel):
    category_id: str


class AssignPayload(CamelModel):
    product_id: str
    category_ids: list[str]
    primary_category_id: str | None = None


@action_handler("category.create", payload=CreateCategoryPayload)
def create(tenant_id, payload: CreateCategoryPayload):
    repo = current_domain.repository_for(Category)
    if payload.parent_id:
        repo.get_for_tenant(tenant_id, payload.parent_id)

    category = Category(tenant_id=tenant_id, slug=slugify(payload.name, suffix=False), **payload.model_dump())
    repo.add(category)
    return category.to_summary()


@action_handler("category.update", payload=UpdateCategoryPayload)
def update(tenant_id, payload: UpdateCategoryPayload):
    repo = current_domain.repository_for(Category)
    category = repo.get_for_tenant(tenant_id, payload.category_id)

    changes = payload.changes()
    changes.pop("category_id")
    if changes.get("parent_id"):
        if changes["parent_id"] == str(category.id):
            raise ValidationFailed("A category cannot be its own parent", field="parentId")
        repo.get_for_tenant(tenant_id, changes["parent_id"])

    for field_name, value in changes.items():
        setattr(category, field_name, value)
    if "name" in changes:
        category.slug = slugify(category.name, suffix=False)
    repo.add(category)
    return category.to_summary()


@action_handler("category.delete", payload=CategoryRefPayload)
def delete(tenant_id, payload: CategoryRefPayload):
    """Delete a category. Its products stay; their links to it go."""
    repo = current_domain.repository_for(Category)
    category = repo.get_for_tenant(tenant_id, payload.category_id)

    memberships = current_domain.repository_for(ProductCategory)
    for record in memberships.for_category(tenant_id, category.id):
        memberships.remove(record)

    products = current_domain.repository_for(Product)
    for product in products.list_for_tenant(tenant_id, category_id=str(category.id)):
        product.category_id = None
        products.add(product)

    for child in repo.children_of(tenant_id, category.id):
        child.parent_id = category.parent_id
        repo.add(child)

    repo.remove(category)
    return {"deleted": True, "categoryId": payload.category_id}


@action_handler("category.assign_product", payload=AssignPayload)
def assign_product(tenant_id, payload: AssignPayload):
    """Replace a product's category links with ``categoryIds``."""
    products = current_domain.repository_for(Product)
    product = products.get_for_tenant(tenant_id, payload.product_id)

    categories = current_domain.repository_for(Category)
    for category_id in payload.category_ids:
        categories.get_for_tenant(tenant_id, category_id)

    primary = payload.primary_category_id or (payload.category_ids[0] if payload.category_ids else None)
    if primary and primary not in payload.category_ids:
        raise ValidationFailed("Primary category must be one of the assigned categories", field="primaryCategoryId")

    memberships = current_domain.repository_for(ProductCategory)
    for record in memberships.for_product(tenant_id, product.id):
        memberships.remove(record)

    for category_id in dict.fromkeys(payload.category_ids):
        memberships.add(
            ProductCategory(
                tenant_id=tenant_id,
                product_id=str(product.id),
                category_id=category_id,
                is_primary=category_id == primary,
            )
        )

    product.category_id = primary
    product.touch()
    products.add(product)
    return {"assigned": len(set(payload.category_ids))}
