"""Domain events for the Order aggregate.

Every change to an order's status is announced by exactly one of these events.
The history recorder turns each of them into an OrderHistory entry.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A new order was placed and entered its initial status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    total_amount = Float(required=True)
    placed_by = Identifier()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An order moved from one status to another."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=50)
    from_status = String(required=True, max_length=20)
    to_status = String(required=True, max_length=20)
    changed_by = Identifier()
    note = Text()
    changed_at = DateTime(required=True)
