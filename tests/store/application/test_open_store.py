"""Application tests for opening a tenant's store."""

import pytest
from protean import current_domain

from commerce.exceptions import NotFound, ValidationFailed
from commerce.store.commands import OpenStore
from commerce.store.store import Store


class TestOpenStore:
    def test_open_store_returns_tenant_id(self):
        tenant = current_domain.process(OpenStore(tenant_id="tenant-new", name="Chai Corner"), asynchronous=False)
        assert tenant == "tenant-new"

    def test_store_is_persisted_with_details(self):
        current_domain.process(
            OpenStore(tenant_id="tenant-new", name="Chai Corner", gstin="29ABCDE1234F1Z5", business_state="Karnataka"),
            asynchronous=False,
        )
        store = current_domain.repository_for(Store).get_for_tenant("tenant-new")
        assert store.name == "Chai Corner"
        assert store.gstin == "29ABCDE1234F1Z5"
        assert store.slug.startswith("chai-corner-")

    def test_explicit_slug_is_kept(self):
        current_domain.process(OpenStore(tenant_id="tenant-new", name="Chai Corner", slug="chai"), asynchronous=False)
        assert current_domain.repository_for(Store).get_for_tenant("tenant-new").slug == "chai"

    def test_second_store_for_tenant_is_rejected(self, store, tenant_id):
        with pytest.raises(ValidationFailed):
            current_domain.process(OpenStore(tenant_id=tenant_id, name="Another"), asynchronous=False)

    def test_missing_store_is_not_found(self):
        with pytest.raises(NotFound):
            current_domain.repository_for(Store).get_for_tenant("tenant-missing")
