"""Operations dashboard: filtered order listing and CSV export."""

import csv
import io
import math
from datetime import UTC, date, datetime, time

import structlog
from protean.exceptions import ValidationError

from ordering.order.order import Order, parse_status
from ordering.order.repository import OrderRepository

logger = structlog.get_logger(__name__)

# Byte-order mark so spreadsheet tools detect UTF-8
CSV_BOM = "\ufeff"

EXPORT_COLUMNS = {
    "order_number": "Order Number",
    "customer_name": "Customer Name",
    "customer_email": "Customer Email",
    "status": "Status",
    "total_amount": "Total Amount",
    "created_at": "Created At",
    "shipping_address": "Shipping Address",
    "payment_method": "Payment Method",
}


def _parse_date(field: str, value: str) -> date | datetime:
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError({field: [f"Invalid date '{value}'. Use YYYY-MM-DD or an ISO 8601 timestamp"]}) from None


def _as_utc(field: str, value, end_of_day: bool = False) -> datetime | None:
    """Bare dates cover the whole day; naive datetimes are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = _parse_date(field, value.strip())
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.max if end_of_day else time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def order_filters(
    search=None,
    status=None,
    date_from=None,
    date_to=None,
    min_amount=None,
    max_amount=None,
) -> dict:
    """Normalise raw dashboard filters into ``OrderRepository.search`` arguments.

    Blank strings count as absent. An unknown status token raises
    ValidationError.
    """
    search = search.strip() if isinstance(search, str) else search
    return {
        "search": search or None,
        "status": parse_status(status).value if status else None,
        "created_from": _as_utc("date_from", date_from),
        "created_to": _as_utc("date_to", date_to, end_of_day=True),
        "min_amount": min_amount,
        "max_amount": max_amount,
    }


def dashboard_orders(orders: OrderRepository, page: int = 1, page_size: int = 10, **filters) -> dict:
    """One page of filtered orders, newest first, with pagination metadata."""
    result = (
        orders.search(**order_filters(**filters))
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {
        "results": result.items,
        "pagination": {
            "page": page,
            "page_size": page_size,
            "page_count": math.ceil(result.total / page_size) if result.total else 0,
            "total": result.total,
        },
    }


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------
def _format_address(order: Order) -> str:
    address = order.shipping_address
    if address is None:
        return "-"
    parts = [
        address.detail_address,
        address.district,
        address.city,
        address.province,
        address.postal_code,
    ]
    return ", ".join(part for part in parts if part) or "-"


def _cell(order: Order, column: str) -> str:
    if column == "customer_name":
        if order.shipping_address is not None:
            return order.shipping_address.receiver_name
        return order.customer_email or "-"
    if column == "total_amount":
        return f"${order.total_amount or 0.0:.2f}"
    if column == "created_at":
        return order.created_at.isoformat() if order.created_at else "-"
    if column == "shipping_address":
        return _format_address(order)
    value = getattr(order, column)
    return str(value) if value else "-"


def export_columns(fields=None) -> list[str]:
    """Requested columns in request order; unknown names are dropped, none means all."""
    if not fields:
        return list(EXPORT_COLUMNS)
    return [field for field in fields if field in EXPORT_COLUMNS]


def orders_to_csv(orders: list[Order], fields=None) -> str:
    """Render orders as CSV: every cell quoted, embedded quotes doubled, BOM first."""
    columns = export_columns(fields)

    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([EXPORT_COLUMNS[column] for column in columns])
    for order in orders:
        writer.writerow([_cell(order, column) for column in columns])

    return CSV_BOM + out.getvalue()


def export_orders(
    orders: OrderRepository,
    exported_by,
    order_ids=None,
    fields=None,
    filters: dict | None = None,
) -> str:
    """Export the selected orders, else the filtered set, else every order."""
    if order_ids:
        selected = orders.list_by_ids(order_ids)
    else:
        selected = orders.search(**order_filters(**(filters or {}))).limit(None).all().items

    logger.info(
        "order.exported",
        exported_by=exported_by,
        order_count=len(selected),
        selection="ids" if order_ids else "filters",
    )
    return orders_to_csv(selected, fields)
