"""Application tests for single and bulk admin status updates."""

from unittest.mock import patch

import pytest
from ordering.history.history import OrderHistory
from ordering.order.order import Order, OrderStatus
from ordering.order.status_update import UpdateOrderStatus, bulk_update_status, update_status
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _history(order_id):
    return current_domain.repository_for(OrderHistory).for_order(order_id)


class TestUpdateOrderStatus:
    def test_status_is_persisted(self, place_order):
        order_id = place_order()
        order = update_status(order_id, "processing", changed_by="admin-001")
        assert order.status == OrderStatus.PROCESSING.value
        assert current_domain.repository_for(Order).get(order_id).status == "processing"

    def test_one_history_entry_is_appended(self, place_order):
        order_id = place_order()
        update_status(order_id, "processing", changed_by="admin-001", note="Picked by warehouse")

        entries = _history(order_id)
        assert len(entries) == 2
        latest = entries[-1]
        assert latest.from_status == "pending"
        assert latest.to_status == "processing"
        assert latest.changed_by == "admin-001"
        assert latest.note == "Picked by warehouse"
        assert latest.sequence == 2

    def test_default_note_is_recorded(self, place_order):
        order_id = place_order()
        update_status(order_id, "cancelled", changed_by="admin-001")
        assert _history(order_id)[-1].note == 'Status changed from "pending" to "cancelled"'

    def test_same_status_is_a_no_op(self, place_order):
        order_id = place_order()
        changed = current_domain.process(
            UpdateOrderStatus(order_id=order_id, status="pending", changed_by="admin-001"),
            asynchronous=False,
        )
        assert changed is False
        assert len(_history(order_id)) == 1

    def test_command_reports_change(self, place_order):
        order_id = place_order()
        changed = current_domain.process(
            UpdateOrderStatus(order_id=order_id, status="processing"),
            asynchronous=False,
        )
        assert changed is True

    def test_invalid_status_is_rejected_without_history(self, place_order):
        order_id = place_order()
        with pytest.raises(ValidationError):
            update_status(order_id, "delivered")
        assert current_domain.repository_for(Order).get(order_id).status == "pending"
        assert len(_history(order_id)) == 1

    def test_illegal_transition_is_rejected(self, place_order):
        order_id = place_order()
        with pytest.raises(ValidationError):
            update_status(order_id, "completed")
        assert len(_history(order_id)) == 1

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            update_status("does-not-exist", "processing")


class TestHistoryContinuity:
    def test_full_lifecycle_forms_a_chain(self, place_order):
        order_id = place_order()
        for status in ("processing", "shipped", "completed"):
            update_status(order_id, status, changed_by="admin-001")

        entries = _history(order_id)
        assert [e.to_status for e in entries] == ["pending", "processing", "shipped", "completed"]
        assert entries[0].from_status is None
        for previous, current in zip(entries, entries[1:]):
            assert current.from_status == previous.to_status
            assert current.changed_at >= previous.changed_at

        order = current_domain.repository_for(Order).get(order_id)
        assert entries[-1].to_status == order.status

    def test_sequences_are_consecutive(self, place_order):
        order_id = place_order()
        update_status(order_id, "processing")
        update_status(order_id, "shipped")
        assert [e.sequence for e in _history(order_id)] == [1, 2, 3]

    def test_histories_are_kept_per_order(self, place_order):
        first = place_order()
        second = place_order()
        update_status(first, "processing")
        assert len(_history(first)) == 2
        assert len(_history(second)) == 1


class TestBulkUpdateStatus:
    def test_mixed_batch(self, place_order):
        order_id = place_order()

        outcome = bulk_update_status([order_id, "missing-order"], "processing", changed_by="admin-001")

        assert outcome["succeeded"] == 1
        assert outcome["failed"] == 1
        assert outcome["message"] == "Bulk update completed: 1 succeeded, 1 failed"

        ok, missing = outcome["results"]
        assert ok["order_id"] == order_id
        assert ok["success"] is True
        assert ok["order"].status == "processing"

        assert missing["order_id"] == "missing-order"
        assert missing["success"] is False
        assert missing["error"] == "not_found"

    def test_results_keep_input_order(self, place_order):
        ids = [place_order() for _ in range(3)]
        outcome = bulk_update_status(ids, "cancelled")
        assert [r["order_id"] for r in outcome["results"]] == ids
        assert outcome["succeeded"] == 3

    def test_illegal_transition_is_reported_per_order(self, place_order):
        shipped = place_order()
        update_status(shipped, "processing")
        update_status(shipped, "shipped")
        pending = place_order()

        outcome = bulk_update_status([shipped, pending], "processing")

        failed, ok = outcome["results"]
        assert failed["success"] is False
        assert failed["error"] == "bad_request"
        assert "Cannot transition from shipped to processing" in failed["message"]
        assert ok["success"] is True

    def test_failures_do_not_roll_back_successes(self, place_order):
        order_id = place_order()
        bulk_update_status([order_id, "missing-order"], "processing")
        assert current_domain.repository_for(Order).get(order_id).status == "processing"
        assert len(_history(order_id)) == 2

    def test_invalid_status_rejects_whole_batch(self, place_order):
        order_id = place_order()
        with pytest.raises(ValidationError):
            bulk_update_status([order_id], "delivered")
        assert current_domain.repository_for(Order).get(order_id).status == "pending"

    def test_unexpected_error_on_one_order_does_not_stop_the_batch(self, place_order):
        broken = place_order()
        healthy = place_order()
        original_change_status = Order.change_status

        def change_status(order, *args, **kwargs):
            if str(order.id) == broken:
                raise RuntimeError("storage hiccup")
            return original_change_status(order, *args, **kwargs)

        with patch.object(Order, "change_status", change_status):
            outcome = bulk_update_status([broken, healthy], "processing", changed_by="admin-001")

        failed, ok = outcome["results"]
        assert failed == {
            "order_id": broken,
            "success": False,
            "error": "internal",
            "message": "Internal error",
        }
        assert ok["success"] is True
        assert outcome["succeeded"] == 1
        assert outcome["failed"] == 1
        assert current_domain.repository_for(Order).get(healthy).status == "processing"
        assert current_domain.repository_for(Order).get(broken).status == "pending"
