"""BDD tests for the order lifecycle and its stock side effects."""

from pytest_bdd import parsers, scenarios, when

from commerce.exceptions import InvalidTransition
from commerce.ordering.service import OrderService

scenarios("features/order_lifecycle.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the order moves to "{status}"'))
def order_moves_to(tenant_id, order, status, error):
    try:
        OrderService().update_status(tenant_id, order.id, status)
    except InvalidTransition as exc:
        error["exc"] = exc
