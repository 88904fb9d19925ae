"""OrderHistory: the immutable audit trail of an order's status changes."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering
from ordering.order.order import OrderStatus


@ordering.aggregate
class OrderHistory:
    """One status transition of one order.

    ``from_status`` is empty only on the entry written when the order is
    placed. Entries are never edited; read back in ``changed_at`` order, the
    ``to_status`` of each entry is the ``from_status`` of the next.
    """

    order_id = Identifier(required=True)
    sequence = Integer(required=True, min_value=1)
    from_status = String(choices=OrderStatus, max_length=20)
    to_status = String(choices=OrderStatus, required=True, max_length=20)
    changed_by = Identifier()
    note = Text()
    changed_at = DateTime(default=lambda: datetime.now(UTC))


@ordering.repository(part_of=OrderHistory)
class OrderHistoryRepository:
    """Append-only access to OrderHistory; entries are never updated."""

    def append(self, order_id, to_status, from_status=None, changed_by=None, note=None, changed_at=None):
        entry = OrderHistory(
            order_id=order_id,
            sequence=self.query.filter(order_id=order_id).count() + 1,
            from_status=from_status,
            to_status=to_status,
            changed_by=changed_by,
            note=note,
            changed_at=changed_at or datetime.now(UTC),
        )
        self.add(entry)
        return entry

    def for_order(self, order_id) -> list[OrderHistory]:
        """All entries for an order, oldest first."""
        return (
            self.query.filter(order_id=order_id)
            .order_by(["changed_at", "sequence"])
            .limit(None)
            .all()
            .items
        )

    def delete_for_order(self, order_id) -> int:
        return self.query.filter(order_id=order_id).limit(None).delete()
