"""FastAPI routes for the Ordering domain: status workflow, history, statistics and the ops dashboard."""

import json
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query, Response
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    BulkUpdateResponse,
    BulkUpdateStatusRequest,
    CancelOrderRequest,
    DashboardOrderPage,
    DashboardStatsResponse,
    DeleteOrderResponse,
    Envelope,
    ExportOrdersRequest,
    HistoryEntryResponse,
    OrderDetailResponse,
    OrderResponse,
    PlaceOrderRequest,
    StatisticsResponse,
    StatusConfigResponse,
    UpdateStatusRequest,
)
from ordering.history.history import OrderHistory, OrderHistoryRepository
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.dashboard import dashboard_orders, export_orders
from ordering.order.order import Order
from ordering.order.queries import order_history, owner_order_detail
from ordering.order.removal import DeleteOrder
from ordering.order.repository import OrderRepository
from ordering.order.statistics import dashboard_statistics, order_statistics
from ordering.order.status_update import bulk_update_status, update_status
from ordering.order.statuses import status_catalogue
from shared.access.policies import require_admin, require_authenticated, require_dashboard_role
from shared.access.port import Caller


# ---------------------------------------------------------------------------
# Repository dependencies
# ---------------------------------------------------------------------------
async def order_repository() -> OrderRepository:
    return current_domain.repository_for(Order)


async def history_repository() -> OrderHistoryRepository:
    return current_domain.repository_for(OrderHistory)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/orders", tags=["orders"])

# Fixed paths are declared before the parametrised ones they would shadow.


@router.get("/status-config", response_model=Envelope[StatusConfigResponse])
async def get_status_config() -> Envelope[StatusConfigResponse]:
    return Envelope(data=StatusConfigResponse(**status_catalogue()))


@router.get("/statistics", response_model=Envelope[StatisticsResponse])
async def get_statistics(
    caller: Caller = Depends(require_admin),
    orders: OrderRepository = Depends(order_repository),
) -> Envelope[StatisticsResponse]:
    return Envelope(data=StatisticsResponse(**order_statistics(orders)))


@router.post("/bulk/status", response_model=Envelope[BulkUpdateResponse])
async def bulk_update_order_status(
    body: BulkUpdateStatusRequest,
    caller: Caller = Depends(require_admin),
) -> Envelope[BulkUpdateResponse]:
    outcome = bulk_update_status(body.order_ids, body.status, changed_by=caller.id, note=body.note)
    results = [
        {**result, "order": OrderResponse.from_order(result["order"])} if result["success"] else result
        for result in outcome["results"]
    ]
    return Envelope(data=BulkUpdateResponse(**{**outcome, "results": results}))


@router.post("", status_code=201, response_model=Envelope[OrderResponse])
async def place_order(
    body: PlaceOrderRequest,
    caller: Caller = Depends(require_authenticated),
    orders: OrderRepository = Depends(order_repository),
) -> Envelope[OrderResponse]:
    """Place an order owned by the caller; the owner cannot be chosen."""
    command = PlaceOrder(
        user_id=caller.id,
        items=json.dumps([item.model_dump() for item in body.items]),
        order_number=body.order_number,
        customer_email=body.customer_email or caller.email,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        payment_method=body.payment_method,
        remark=body.remark,
        placed_by=caller.id,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return Envelope(data=OrderResponse.from_order(orders.get(order_id)))


@router.post("/{order_id}/status", response_model=Envelope[OrderResponse])
async def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    caller: Caller = Depends(require_admin),
) -> Envelope[OrderResponse]:
    order = update_status(order_id, body.status, changed_by=caller.id, note=body.note)
    return Envelope(data=OrderResponse.from_order(order))


@router.get("/{order_id}/history", response_model=Envelope[list[HistoryEntryResponse]])
async def get_order_history(
    order_id: str,
    caller: Caller = Depends(require_admin),
    orders: OrderRepository = Depends(order_repository),
    histories: OrderHistoryRepository = Depends(history_repository),
) -> Envelope[list[HistoryEntryResponse]]:
    entries = order_history(orders, histories, order_id)
    return Envelope(data=[HistoryEntryResponse.from_entry(entry) for entry in entries])


@router.delete("/{order_id}", response_model=Envelope[DeleteOrderResponse])
async def delete_order(
    order_id: str,
    caller: Caller = Depends(require_admin),
) -> Envelope[DeleteOrderResponse]:
    removed = current_domain.process(DeleteOrder(order_id=order_id, deleted_by=caller.id), asynchronous=False)
    return Envelope(data=DeleteOrderResponse(order_id=order_id, history_entries_removed=removed))


@router.post("/{order_number}/cancel", response_model=Envelope[OrderResponse])
async def cancel_order(
    order_number: str,
    body: CancelOrderRequest | None = None,
    caller: Caller = Depends(require_authenticated),
    orders: OrderRepository = Depends(order_repository),
) -> Envelope[OrderResponse]:
    command = CancelOrder(
        order_number=order_number,
        user_id=caller.id,
        reason=body.reason if body else None,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return Envelope(data=OrderResponse.from_order(orders.get(order_id)))


@router.get("/{order_number}/detail", response_model=Envelope[OrderDetailResponse])
async def get_my_order_detail(
    order_number: str,
    caller: Caller = Depends(require_authenticated),
    orders: OrderRepository = Depends(order_repository),
    histories: OrderHistoryRepository = Depends(history_repository),
) -> Envelope[OrderDetailResponse]:
    order, entries = owner_order_detail(orders, histories, order_number, caller.id)
    detail = OrderDetailResponse(
        **OrderResponse.from_order(order).model_dump(),
        history=[HistoryEntryResponse.from_entry(entry) for entry in entries],
    )
    return Envelope(data=detail)


# ---------------------------------------------------------------------------
# Operations Dashboard Router
# ---------------------------------------------------------------------------
dashboard_router = APIRouter(prefix="/ops-dashboard", tags=["ops-dashboard"])


@dashboard_router.get("/orders/stats", response_model=Envelope[DashboardStatsResponse])
async def get_dashboard_order_stats(
    caller: Caller = Depends(require_dashboard_role),
    orders: OrderRepository = Depends(order_repository),
) -> Envelope[DashboardStatsResponse]:
    return Envelope(data=DashboardStatsResponse(**dashboard_statistics(orders)))


@dashboard_router.get("/orders", response_model=Envelope[DashboardOrderPage])
async def get_dashboard_orders(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    search: str | None = None,
    status: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    min_amount: float | None = Query(default=None, ge=0),
    max_amount: float | None = Query(default=None, ge=0),
    caller: Caller = Depends(require_dashboard_role),
    orders: OrderRepository = Depends(order_repository),
) -> Envelope[DashboardOrderPage]:
    listing = dashboard_orders(
        orders,
        page=page,
        page_size=page_size,
        search=search,
        status=status,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
    )
    return Envelope(
        data=DashboardOrderPage(
            results=[OrderResponse.from_order(order) for order in listing["results"]],
            pagination=listing["pagination"],
        )
    )


@dashboard_router.post("/orders/export")
async def export_dashboard_orders(
    body: ExportOrdersRequest,
    caller: Caller = Depends(require_dashboard_role),
    orders: OrderRepository = Depends(order_repository),
) -> Response:
    """CSV download of the selected orders, or of every order matching ``filters``."""
    content = export_orders(
        orders,
        exported_by=caller.id,
        order_ids=body.order_ids,
        fields=body.fields,
        filters=body.filters.model_dump() if body.filters else None,
    )
    filename = f"orders-{datetime.now(UTC):%Y%m%d%H%M%S}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
