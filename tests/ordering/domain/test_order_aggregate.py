"""Tests for Order placement, ownership and line items."""

import re

import pytest
from ordering.order.events import OrderPlaced
from ordering.order.order import Order, OrderItem, OrderStatus, ShippingAddress
from protean.exceptions import ValidationError


def _place(**overrides):
    kwargs = {
        "user_id": "user-001",
        "items_data": [
            {"product_id": "prod-001", "product_name": "Ceramic Mug", "quantity": 2, "unit_price": 12.5},
            {"product_id": "prod-002", "product_name": "Tea Towel", "quantity": 1, "unit_price": 8.0},
        ],
    }
    kwargs.update(overrides)
    return Order.place(**kwargs)


class TestOrderPlacement:
    def test_new_order_is_pending(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value

    def test_total_is_sum_of_subtotals(self):
        order = _place()
        assert order.total_amount == 33.0

    def test_order_number_is_generated(self):
        order = _place()
        assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{6}", order.order_number)

    def test_explicit_order_number_is_kept(self):
        order = _place(order_number="ORD-CUSTOM-1")
        assert order.order_number == "ORD-CUSTOM-1"

    def test_timestamps_are_set(self):
        order = _place()
        assert order.created_at is not None
        assert order.updated_at == order.created_at

    def test_shipping_address_snapshot(self):
        order = _place(
            shipping_address={
                "receiver_name": "Jane Doe",
                "receiver_phone": "555-0100",
                "city": "Springfield",
                "detail_address": "123 Main St",
            }
        )
        assert isinstance(order.shipping_address, ShippingAddress)
        assert order.shipping_address.city == "Springfield"

    def test_placement_raises_order_placed(self):
        order = _place(placed_by="admin-001")
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == str(order.id)
        assert event.status == "pending"
        assert event.placed_by == "admin-001"

    def test_placed_by_defaults_to_owner(self):
        order = _place()
        assert order._events[0].placed_by == "user-001"

    def test_order_without_items_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place(items_data=[])
        assert "items" in exc.value.messages


class TestOrderItem:
    def test_subtotal(self):
        item = OrderItem(product_id="prod-001", product_name="Mug", quantity=3, unit_price=4.1)
        assert item.subtotal == 12.3

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            OrderItem(product_id="prod-001", product_name="Mug", quantity=0, unit_price=4.0)


class TestOwnership:
    def test_owner_is_recognised(self):
        assert _place().is_owned_by("user-001")

    def test_other_user_is_not_owner(self):
        assert not _place().is_owned_by("user-002")

    def test_missing_user_is_not_owner(self):
        assert not _place().is_owned_by(None)
