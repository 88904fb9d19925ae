"""Order counts for the admin API and the operations dashboard."""

from ordering.order.order import OrderStatus
from ordering.order.repository import OrderRepository


def order_statistics(orders: OrderRepository) -> dict[str, int]:
    """Total plus one count per status, each from its own count query."""
    stats = {"total": orders.count_all()}
    for status in OrderStatus:
        stats[status.value] = orders.count_with_status(status)
    return stats


def dashboard_statistics(orders: OrderRepository) -> dict:
    """Revenue summary and status breakdown over every order."""
    all_orders = orders.list_all()

    total_orders = len(all_orders)
    total_revenue = round(sum(order.total_amount or 0.0 for order in all_orders), 2)

    breakdown: dict[str, int] = {}
    for order in all_orders:
        breakdown[order.status] = breakdown.get(order.status, 0) + 1

    return {
        "total_orders": total_orders,
        "total_revenue": total_revenue,
        "average_order_value": round(total_revenue / total_orders, 2) if total_orders else 0.0,
        "status_breakdown": breakdown,
    }
