"""Records an OrderHistory entry for every order status event.

Runs synchronously after the order's unit of work commits. A failure here is
logged and swallowed: the order change has already been committed and stays
authoritative even when its audit entry could not be written.
"""

import structlog
from protean import handle
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.history.history import OrderHistory
from ordering.order.events import OrderPlaced, OrderStatusChanged

logger = structlog.get_logger(__name__)


def _record(**fields) -> None:
    try:
        current_domain.repository_for(OrderHistory).append(**fields)
    except Exception:
        logger.exception(
            "history.append_failed",
            order_id=fields.get("order_id"),
            from_status=fields.get("from_status"),
            to_status=fields.get("to_status"),
        )
    else:
        logger.info(
            "history.appended",
            order_id=fields.get("order_id"),
            from_status=fields.get("from_status"),
            to_status=fields.get("to_status"),
        )


@ordering.event_handler(part_of=OrderHistory, stream_category="ordering::order")
class OrderHistoryRecorder:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced):
        _record(
            order_id=event.order_id,
            from_status=None,
            to_status=event.status,
            changed_by=event.placed_by,
            note="created",
            changed_at=event.placed_at,
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged):
        _record(
            order_id=event.order_id,
            from_status=event.from_status,
            to_status=event.to_status,
            changed_by=event.changed_by,
            note=event.note,
            changed_at=event.changed_at,
        )
