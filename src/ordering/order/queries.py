"""Read-side use cases: admin history lookup and the owner's order detail."""

from ordering.history.history import OrderHistory, OrderHistoryRepository
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from shared.errors import ForbiddenError


def order_history(orders: OrderRepository, histories: OrderHistoryRepository, order_id) -> list[OrderHistory]:
    """History of an existing order, oldest entry first."""
    orders.get(order_id)  # ObjectNotFoundError for unknown orders
    return histories.for_order(order_id)


def owner_order_detail(
    orders: OrderRepository,
    histories: OrderHistoryRepository,
    order_number: str,
    user_id,
) -> tuple[Order, list[OrderHistory]]:
    """An order together with its history, for its owner only.

    A caller who does not own the order is told Forbidden rather than
    NotFound, so the order's existence is not hidden.
    """
    order = orders.get_by_number(order_number)
    if not order.is_owned_by(user_id):
        raise ForbiddenError("You do not have permission to view this order")
    return order, histories.for_order(order.id)
