"""Order aggregate: the unit whose status workflow is audited.

State Machine (5 states):
    pending → processing → shipped → completed
    pending / processing / shipped → cancelled

``completed`` and ``cancelled`` are terminal. ``change_status`` is the only
method that writes ``status`` after placement, and it raises exactly one
OrderStatusChanged event per effective change so that history can never
miss a transition.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# State machine transition map
STATUS_TRANSITIONS = {
    OrderStatus.PENDING: (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
    OrderStatus.COMPLETED: (),  # Terminal
    OrderStatus.CANCELLED: (),  # Terminal
}

# Statuses a customer may cancel from when the domain does not configure them
DEFAULT_CANCELLABLE_STATUSES = (OrderStatus.PENDING.value,)

# Timestamp stamped when an order enters the status
_STATUS_TIMESTAMPS = {
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.COMPLETED: "completed_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


def parse_status(value) -> OrderStatus:
    """Return the OrderStatus for a token, rejecting anything outside the set."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Invalid status '{value}'. Allowed values: {allowed}"]}) from None


def generate_order_number() -> str:
    return f"ORD-{datetime.now(UTC):%Y%m%d}-{uuid4().hex[:6].upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, captured when the order is placed.

    The snapshot is immutable: editing the customer's address book later does
    not rewrite the destination of an order already placed.
    """

    receiver_name = String(required=True, max_length=100)
    receiver_phone = String(required=True, max_length=30)
    province = String(max_length=100)
    city = String(required=True, max_length=100)
    district = String(max_length=100)
    detail_address = String(required=True, max_length=255)
    postal_code = String(max_length=20)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A product line on an order, priced at the moment of purchase."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def subtotal(self) -> float:
        return round(self.quantity * self.unit_price, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    user_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0, min_value=0.0)
    customer_email = String(max_length=254)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(max_length=50)
    remark = Text()
    shipped_at = DateTime()
    completed_at = DateTime()
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        items_data,
        order_number=None,
        customer_email=None,
        shipping_address=None,
        payment_method=None,
        remark=None,
        placed_by=None,
    ):
        """Place a new order in its initial status.

        Args:
            user_id: The user who owns the order.
            items_data: List of dicts with product_id, product_name,
                        quantity, unit_price.
            order_number: Human-readable number; generated when omitted.
            shipping_address: Dict matching ShippingAddress, or None.
            placed_by: Actor creating the order, recorded in history.
                       Defaults to the owner.
        """
        if not items_data:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        now = datetime.now(UTC)
        items = [OrderItem(**item) for item in items_data]

        order = cls(
            order_number=order_number or generate_order_number(),
            user_id=user_id,
            items=items,
            total_amount=round(sum(item.subtotal for item in items), 2),
            customer_email=customer_email,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            payment_method=payment_method,
            remark=remark,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(user_id),
                status=order.status,
                total_amount=order.total_amount,
                placed_by=str(placed_by or user_id),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id) -> bool:
        return user_id is not None and str(self.user_id) == str(user_id)

    def allowed_transitions(self) -> tuple[OrderStatus, ...]:
        return STATUS_TRANSITIONS[OrderStatus(self.status)]

    # -------------------------------------------------------------------
    # Status workflow
    # -------------------------------------------------------------------
    def change_status(self, new_status, changed_by=None, note=None) -> bool:
        """Move the order to ``new_status``.

        Returns False without raising any event when the order is already in
        that status. Raises ValidationError for unknown tokens and for
        transitions the state machine does not allow.
        """
        target = parse_status(new_status)
        current = OrderStatus(self.status)

        if target == current:
            return False

        allowed = STATUS_TRANSITIONS[current]
        if target not in allowed:
            allowed_text = ", ".join(s.value for s in allowed) or "none"
            raise ValidationError(
                {
                    "status": [
                        f"Cannot transition from {current.value} to {target.value}. "
                        f"Allowed transitions: {allowed_text}"
                    ]
                }
            )

        now = datetime.now(UTC)
        self.status = target.value
        if target in _STATUS_TIMESTAMPS:
            setattr(self, _STATUS_TIMESTAMPS[target], now)
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                from_status=current.value,
                to_status=target.value,
                changed_by=str(changed_by) if changed_by is not None else None,
                note=note or f'Status changed from "{current.value}" to "{target.value}"',
                changed_at=now,
            )
        )
        return True

    def cancel_by_owner(self, user_id, cancellable_statuses, reason=None):
        """Cancel on behalf of the owning customer.

        Ownership is checked by the caller; this only enforces that the order
        is still in one of ``cancellable_statuses`` and is not yet terminal.
        """
        if self.status not in cancellable_statuses or not self.allowed_transitions():
            allowed = ", ".join(cancellable_statuses)
            raise ValidationError(
                {"status": [f"Order cannot be cancelled in status {self.status}. Cancellable statuses: {allowed}"]}
            )

        note = "Cancelled by customer"
        if reason:
            note = f"{note}: {reason}"
        self.change_status(OrderStatus.CANCELLED, changed_by=user_id, note=note)
