"""Ordering bounded context: orders, their status workflow and history.

Every status an order ever takes is recorded as an immutable history entry.
Admins drive the workflow; customers may only read and cancel their own orders.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
