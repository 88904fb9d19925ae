"""Order placement: command and handler."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    order_number = String(max_length=50)
    customer_email = String(max_length=254)
    shipping_address = Text()  # JSON: address dict
    payment_method = String(max_length=50)
    remark = Text()
    placed_by = Identifier()


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        order = Order.place(
            user_id=command.user_id,
            items_data=items_data,
            order_number=command.order_number,
            customer_email=command.customer_email,
            shipping_address=shipping_address,
            payment_method=command.payment_method,
            remark=command.remark,
            placed_by=command.placed_by,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
