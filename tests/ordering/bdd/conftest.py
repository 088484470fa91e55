"""Shared BDD fixtures and step definitions for the order lifecycle."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from commerce.exceptions import ValidationFailed
from commerce.inventory.variant import Variant
from commerce.ordering.order import Order
from commerce.ordering.service import OrderService


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured transition errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a store selling a variant with 10 units in stock", target_fixture="stocked_variant")
def stocked_variant(store, variant):
    return variant


@given(parsers.cfparse("an order for {quantity:d} units of the variant"), target_fixture="order")
def order_for_variant(tenant_id, product, stocked_variant, quantity):
    return OrderService().create_order(
        tenant_id,
        "+919800000001",
        [
            {
                "product_id": str(product.id),
                "variant_id": str(stocked_variant.id),
                "name": product.name,
                "quantity": quantity,
                "unit_price": product.price,
            }
        ],
    )


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert current_domain.repository_for(Order).get(order.id).status == status


@then(parsers.cfparse('the order fulfillment status is "{fulfillment_status}"'))
def order_fulfillment_is(order, fulfillment_status):
    assert current_domain.repository_for(Order).get(order.id).fulfillment_status == fulfillment_status


@then(parsers.cfparse("the variant has {stock:d} units in stock"))
def variant_stock_is(stocked_variant, stock):
    assert current_domain.repository_for(Variant).get(stocked_variant.id).stock == stock


@then(parsers.cfparse('the transition fails with "{message}"'))
def transition_fails(error, message):
    assert error["exc"] is not None, "Expected the transition to fail but it succeeded"
    assert isinstance(error["exc"], ValidationFailed)
    assert message in error["exc"].message
