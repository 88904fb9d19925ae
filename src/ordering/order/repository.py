"""Order repository: the storage interface the order workflow depends on."""

from datetime import datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.query import Q

from ordering.domain import ordering
from ordering.order.order import Order, OrderItem, OrderStatus


@ordering.repository(part_of=Order)
class OrderRepository:
    def get_by_number(self, order_number: str) -> Order:
        order = self.query.filter(order_number=order_number).first
        if order is None:
            raise ObjectNotFoundError(f"Order {order_number} not found")
        return order

    def count_with_status(self, status: OrderStatus) -> int:
        return self.query.filter(status=status.value).count()

    def count_all(self) -> int:
        return self.query.count()

    def list_all(self) -> list[Order]:
        return self.query.limit(None).all().items

    def list_by_ids(self, order_ids) -> list[Order]:
        """The given orders that exist, newest first; unknown ids are skipped."""
        return self.query.filter(id__in=list(order_ids)).order_by(["-created_at"]).limit(None).all().items

    def search(
        self,
        search: str | None = None,
        status: str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        min_amount: float | None = None,
        max_amount: float | None = None,
    ):
        """Dashboard filters as a QuerySet, newest first.

        ``search`` matches the order number or the customer email, ignoring
        case. Date and amount bounds are inclusive.
        """
        query = self.query
        if search:
            query = query.filter(Q(order_number__icontains=search) | Q(customer_email__icontains=search))
        if status:
            query = query.filter(status=status)
        if created_from is not None:
            query = query.filter(created_at__gte=created_from)
        if created_to is not None:
            query = query.filter(created_at__lte=created_to)
        if min_amount is not None:
            query = query.filter(total_amount__gte=min_amount)
        if max_amount is not None:
            query = query.filter(total_amount__lte=max_amount)
        return query.order_by(["-created_at"])

    def remove(self, order: Order) -> None:
        """Hard-delete an order and its line items.

        Only the administrative delete uses this; history rows are removed by
        the caller inside the same unit of work.
        """
        # Repositories expose no delete, so rows are removed through the DAOs.
        # Both DAOs join the caller's unit of work.
        item_dao = self._domain.repository_for(OrderItem)._dao
        for item in list(order.items):
            item_dao.delete(item)
        self._dao.delete(order)
