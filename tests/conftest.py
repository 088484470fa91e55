import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _commerce_domain(request):
    """Initialize the commerce domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from commerce.domain import commerce

    commerce.init()
    return commerce


@pytest.fixture(scope="session", autouse=True)
def setup_db(_commerce_domain):
    from commerce.utils.db import drop_db, setup_db

    setup_db(_commerce_domain)

    yield

    drop_db(_commerce_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_commerce_domain):
    """Push domain context before each test, cleanup after."""
    from commerce.sink import reset_event_sink

    reset_event_sink()
    ctx = _commerce_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
    reset_event_sink()


@pytest.fixture()
def sink():
    """The in-memory event sink that receives every published event."""
    from commerce.sink import get_event_sink

    return get_event_sink()


@pytest.fixture()
def tenant_id():
    return "tenant-001"


@pytest.fixture()
def store(tenant_id):
    from protean import current_domain

    from commerce.store.store import Store

    store = Store.open(tenant_id, "Priya's Handlooms", whatsapp_number="+919800000000", business_state="Karnataka")
    current_domain.repository_for(Store).add(store)
    return store


@pytest.fixture()
def product(tenant_id):
    from protean import current_domain

    from commerce.catalogue.product import Product

    product = Product(tenant_id=tenant_id, name="Indigo Kurta", slug="indigo-kurta", price=1200.0, status="active")
    current_domain.repository_for(Product).add(product)
    return product


@pytest.fixture()
def variant(tenant_id, product):
    from protean import current_domain

    from commerce.inventory.variant import Variant

    variant = Variant(
        tenant_id=tenant_id,
        product_id=str(product.id),
        sku="KURTA-M",
        attributes='{"size": "M"}',
        stock=10,
        low_stock_threshold=3,
    )
    current_domain.repository_for(Variant).add(variant)
    return variant
