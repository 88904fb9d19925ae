"""Admin status updates: single-order command and the bulk use case."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, parse_status
from shared.errors import flatten_messages

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    changed_by = Identifier()
    note = Text()


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        """Returns True when the status changed, False for a no-op."""
        target = parse_status(command.status)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        changed = order.change_status(target, changed_by=command.changed_by, note=command.note)
        if changed:
            repo.add(order)
            logger.info(
                "order.status_changed",
                order_id=command.order_id,
                from_status=previous,
                to_status=target.value,
                changed_by=command.changed_by,
            )
        return changed


def update_status(order_id, status, changed_by=None, note=None) -> Order:
    """Apply one status update and return the order as persisted."""
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, changed_by=changed_by, note=note),
        asynchronous=False,
    )
    return current_domain.repository_for(Order).get(order_id)


def bulk_update_status(order_ids, status, changed_by=None, note=None) -> dict:
    """Update each order independently; one failure never aborts the rest.

    Returns ``{"results": [...], "succeeded": n, "failed": m, "message": ...}``
    where every result carries ``order_id`` and ``success``, plus the updated
    ``order`` on success or an ``error`` code and ``message`` on failure.
    """
    target = parse_status(status)

    results = []
    for order_id in order_ids:
        try:
            order = update_status(order_id, target.value, changed_by=changed_by, note=note)
        except ObjectNotFoundError:
            results.append(
                {
                    "order_id": order_id,
                    "success": False,
                    "error": "not_found",
                    "message": f"Order {order_id} not found",
                }
            )
        except ValidationError as exc:
            results.append(
                {
                    "order_id": order_id,
                    "success": False,
                    "error": "bad_request",
                    "message": flatten_messages(exc.messages),
                }
            )
        except Exception:
            logger.exception("order.bulk_status_update_failed", order_id=order_id, status=target.value)
            results.append(
                {
                    "order_id": order_id,
                    "success": False,
                    "error": "internal",
                    "message": "Internal error",
                }
            )
        else:
            results.append({"order_id": order_id, "success": True, "order": order})

    succeeded = sum(1 for result in results if result["success"])
    failed = len(results) - succeeded
    logger.info("order.bulk_status_update", status=target.value, succeeded=succeeded, failed=failed)

    return {
        "results": results,
        "succeeded": succeeded,
        "failed": failed,
        "message": f"Bulk update completed: {succeeded} succeeded, {failed} failed",
    }
