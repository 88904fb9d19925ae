import json

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def items_data():
    return [
        {"product_id": "prod-001", "product_name": "Ceramic Mug", "quantity": 2, "unit_price": 12.5},
        {"product_id": "prod-002", "product_name": "Tea Towel", "quantity": 1, "unit_price": 8.0},
    ]


@pytest.fixture()
def shipping_address():
    return {
        "receiver_name": "Jane Doe",
        "receiver_phone": "555-0100",
        "city": "Springfield",
        "detail_address": "123 Main St",
        "postal_code": "62701",
    }


@pytest.fixture()
def place_order(items_data, shipping_address):
    """Factory: place an order through the command path and return its id."""
    from ordering.order.creation import PlaceOrder
    from protean import current_domain

    def _place(user_id="user-001", order_number=None, placed_by=None):
        return current_domain.process(
            PlaceOrder(
                user_id=user_id,
                items=json.dumps(items_data),
                order_number=order_number,
                customer_email="jane@example.com",
                shipping_address=json.dumps(shipping_address),
                payment_method="card",
                placed_by=placed_by,
            ),
            asynchronous=False,
        )

    return _place
