"""Shared BDD fixtures and step definitions for the order status workflow."""

import json

import pytest
from ordering.history.history import OrderHistory
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


def _history(order_id):
    return current_domain.repository_for(OrderHistory).for_order(order_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('a pending order placed by "{user_id}"'), target_fixture="order_id")
def _(user_id):
    return current_domain.process(
        PlaceOrder(
            user_id=user_id,
            items=json.dumps(
                [{"product_id": "prod-001", "product_name": "Ceramic Mug", "quantity": 1, "unit_price": 12.5}]
            ),
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.re(r"the order history has (?P<count>\d+) entr(?:y|ies)"))
def _(order_id, count):
    assert len(_history(order_id)) == int(count)


@then(parsers.parse('the latest history entry moves from "{from_status}" to "{to_status}"'))
def _(order_id, from_status, to_status):
    latest = _history(order_id)[-1]
    assert latest.from_status == (None if from_status == "none" else from_status)
    assert latest.to_status == to_status


@then("the order history forms an unbroken chain")
def _(order_id):
    entries = _history(order_id)
    assert entries[0].from_status is None
    for previous, current in zip(entries, entries[1:]):
        assert current.from_status == previous.to_status
    assert entries[-1].to_status == current_domain.repository_for(Order).get(order_id).status
