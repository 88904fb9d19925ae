"""Display metadata for every order status, served to storefront clients."""

from ordering.order.order import STATUS_TRANSITIONS, OrderStatus

STATUS_CONFIG = {
    OrderStatus.PENDING: {
        "label": "Pending",
        "color": "#fbbf24",
        "icon": "Clock",
        "description": "Order placed, waiting to be processed",
    },
    OrderStatus.PROCESSING: {
        "label": "Processing",
        "color": "#3b82f6",
        "icon": "Settings",
        "description": "Order is being processed",
    },
    OrderStatus.SHIPPED: {
        "label": "Shipped",
        "color": "#8b5cf6",
        "icon": "Truck",
        "description": "Items have been shipped",
    },
    OrderStatus.COMPLETED: {
        "label": "Completed",
        "color": "#10b981",
        "icon": "CheckCircle",
        "description": "Order completed",
    },
    OrderStatus.CANCELLED: {
        "label": "Cancelled",
        "color": "#ef4444",
        "icon": "XCircle",
        "description": "Order was cancelled",
    },
}


def status_catalogue() -> dict:
    """Static status tokens, their display metadata and allowed transitions."""
    return {
        "status_config": {status.value: dict(meta) for status, meta in STATUS_CONFIG.items()},
        "status_transitions": {
            status.value: [target.value for target in targets] for status, targets in STATUS_TRANSITIONS.items()
        },
    }
