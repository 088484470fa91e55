"""Application tests for tenant-scoped repository reads."""

import pytest
from protean import current_domain

from commerce.catalogue.product import Product
from commerce.exceptions import NotFound, PersistenceError
from commerce.inventory.variant import Variant
from commerce.ordering.order import Order
from commerce.pricing.discount import Discount
from commerce.shared.tenancy import TenantScopedRepository, store_errors


class TestTenantScopedRepositories:
    @pytest.mark.parametrize("aggregate", [Product, Variant, Order, Discount])
    def test_registered_repositories_keep_the_tenant_reads(self, aggregate):
        repo = current_domain.repository_for(aggregate)
        assert isinstance(repo, TenantScopedRepository)
        assert callable(repo.get_for_tenant)

    def test_get_for_tenant_returns_own_record(self, tenant_id, variant):
        found = current_domain.repository_for(Variant).get_for_tenant(tenant_id, variant.id)
        assert str(found.id) == str(variant.id)

    def test_foreign_record_reads_as_missing(self, variant):
        with pytest.raises(NotFound) as exc:
            current_domain.repository_for(Variant).get_for_tenant("tenant-other", variant.id)
        assert exc.value.message == f"Variant {variant.id} not found"

    def test_list_and_count_are_scoped(self, tenant_id, product):
        current_domain.repository_for(Product).add(
            Product(tenant_id="tenant-other", name="Brass Lamp", slug="brass-lamp", price=900.0)
        )
        repo = current_domain.repository_for(Product)
        assert [p.name for p in repo.list_for_tenant(tenant_id)] == ["Indigo Kurta"]
        assert repo.count_for_tenant("tenant-other") == 1
        assert repo.count_for_tenant(tenant_id, status="draft") == 0


class TestStoreErrors:
    def test_store_failure_becomes_persistence_error(self):
        with pytest.raises(PersistenceError) as exc:
            with store_errors("save order"):
                raise ConnectionError("socket closed")
        assert exc.value.message == "Could not save order: socket closed"
        assert isinstance(exc.value.__cause__, ConnectionError)

    def test_domain_errors_pass_through(self):
        with pytest.raises(NotFound):
            with store_errors("load variant"):
                raise NotFound("Variant", "v-1")
