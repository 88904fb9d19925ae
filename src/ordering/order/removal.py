"""Administrative hard delete of an order and its history."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.history.history import OrderHistory
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)
    deleted_by = Identifier()


@ordering.command_handler(part_of=Order)
class DeleteOrderHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        """History first, then the order, both inside the handler's unit of work."""
        orders = current_domain.repository_for(Order)
        order = orders.get(command.order_id)

        removed = current_domain.repository_for(OrderHistory).delete_for_order(command.order_id)
        orders.remove(order)

        logger.info(
            "order.deleted",
            order_id=command.order_id,
            order_number=order.order_number,
            deleted_by=command.deleted_by,
            history_entries_removed=removed,
        )
        return removed
