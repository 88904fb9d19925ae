"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Every successful response is wrapped in
``{"data": ...}``.
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    data: T


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    receiver_name: str
    receiver_phone: str
    province: str | None = None
    city: str
    district: str | None = None
    detail_address: str
    postal_code: str | None = None


class OrderItemSchema(BaseModel):
    product_id: str
    product_name: str
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    items: list[OrderItemSchema] = Field(min_length=1)
    order_number: str | None = None
    customer_email: str | None = None
    shipping_address: ShippingAddressSchema | None = None
    payment_method: str | None = None
    remark: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "prod-001",
                            "product_name": "Ceramic Mug",
                            "quantity": 2,
                            "unit_price": 12.5,
                        }
                    ],
                    "customer_email": "jane@example.com",
                    "shipping_address": {
                        "receiver_name": "Jane Doe",
                        "receiver_phone": "555-0100",
                        "city": "Springfield",
                        "detail_address": "123 Main St",
                        "postal_code": "62701",
                    },
                    "payment_method": "card",
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: str
    note: str | None = None

    model_config = {"json_schema_extra": {"examples": [{"status": "processing", "note": "Picked by warehouse"}]}}


class BulkUpdateStatusRequest(BaseModel):
    order_ids: list[str] = Field(min_length=1)
    status: str
    note: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class OrderFilterSchema(BaseModel):
    search: str | None = None
    status: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    min_amount: float | None = Field(default=None, ge=0)
    max_amount: float | None = Field(default=None, ge=0)


class ExportOrdersRequest(BaseModel):
    """Selected ``order_ids`` win over ``filters``; with neither, every order is exported."""

    order_ids: list[str] = []
    fields: list[str] = []
    filters: OrderFilterSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "fields": ["order_number", "status", "total_amount"],
                    "filters": {"status": "pending", "min_amount": 20},
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    total_amount: float
    customer_email: str | None = None
    payment_method: str | None = None
    remark: str | None = None
    shipping_address: ShippingAddressSchema | None = None
    items: list[OrderItemResponse] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
    shipped_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        address = order.shipping_address
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            status=order.status,
            total_amount=order.total_amount or 0.0,
            customer_email=order.customer_email,
            payment_method=order.payment_method,
            remark=order.remark,
            shipping_address=ShippingAddressSchema(**address.to_dict()) if address else None,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
            shipped_at=order.shipped_at,
            completed_at=order.completed_at,
            cancelled_at=order.cancelled_at,
        )


class HistoryEntryResponse(BaseModel):
    id: str
    order_id: str
    from_status: str | None = None
    to_status: str
    changed_by: str | None = None
    note: str | None = None
    changed_at: datetime

    @classmethod
    def from_entry(cls, entry) -> "HistoryEntryResponse":
        return cls(
            id=str(entry.id),
            order_id=str(entry.order_id),
            from_status=entry.from_status,
            to_status=entry.to_status,
            changed_by=str(entry.changed_by) if entry.changed_by else None,
            note=entry.note,
            changed_at=entry.changed_at,
        )


class OrderDetailResponse(OrderResponse):
    history: list[HistoryEntryResponse] = []


class BulkUpdateResult(BaseModel):
    order_id: str
    success: bool
    order: OrderResponse | None = None
    error: str | None = None
    message: str | None = None


class BulkUpdateResponse(BaseModel):
    results: list[BulkUpdateResult]
    succeeded: int
    failed: int
    message: str


class StatisticsResponse(BaseModel):
    total: int
    pending: int
    processing: int
    shipped: int
    completed: int
    cancelled: int


class StatusMetadata(BaseModel):
    label: str
    color: str
    icon: str
    description: str


class StatusConfigResponse(BaseModel):
    status_config: dict[str, StatusMetadata]
    status_transitions: dict[str, list[str]]


class DashboardStatsResponse(BaseModel):
    total_orders: int
    total_revenue: float
    average_order_value: float
    status_breakdown: dict[str, int]


class DeleteOrderResponse(BaseModel):
    order_id: str
    history_entries_removed: int


class Pagination(BaseModel):
    page: int
    page_size: int
    page_count: int
    total: int


class DashboardOrderPage(BaseModel):
    results: list[OrderResponse]
    pagination: Pagination
