"""Customer self-service cancellation: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import DEFAULT_CANCELLABLE_STATUSES, Order
from shared.errors import ForbiddenError

logger = structlog.get_logger(__name__)


def cancellable_statuses() -> tuple[str, ...]:
    """Statuses a customer may still cancel from, per domain configuration."""
    return tuple(getattr(current_domain, "CANCELLABLE_STATUSES", DEFAULT_CANCELLABLE_STATUSES))


@ordering.command(part_of="Order")
class CancelOrder:
    order_number = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    reason = Text()


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_by_number(command.order_number)

        if not order.is_owned_by(command.user_id):
            logger.warning(
                "order.cancel_denied",
                order_number=command.order_number,
                user_id=command.user_id,
            )
            raise ForbiddenError("You do not have permission to cancel this order")

        order.cancel_by_owner(command.user_id, cancellable_statuses(), reason=command.reason)
        repo.add(order)
        logger.info("order.cancelled_by_customer", order_number=command.order_number, user_id=command.user_id)
        return str(order.id)
