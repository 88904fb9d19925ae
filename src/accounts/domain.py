"""Accounts bounded context: a customer's address book and wishlist."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

accounts = Domain(name="accounts")
