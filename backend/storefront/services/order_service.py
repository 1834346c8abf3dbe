"""
Order Service
Use cases for placing and editing orders

Author: TM3
Date: 2025-10-22
"""
import logging
from typing import List

from storefront.domain.factories import OrderFactory
from storefront.domain.order import Order
from storefront.domain.repositories import OrderRepository, ProductRepository
from storefront.services.errors import NotFoundError, use_case
from storefront.services.schemas import OrderView, PlaceOrderCommand


logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for order operations

    Handles:
    - Order placement from product references (through OrderFactory)
    - Line item changes on draft orders
    - Confirmation and cancellation
    """

    def __init__(self, orders: OrderRepository, products: ProductRepository):
        self.orders = orders
        self.factory = OrderFactory(products)

    def place_order(self, command: PlaceOrderCommand) -> OrderView:
        """
        Place a new draft order

        Steps:
        1. Load every referenced product
        2. Build line items from product price and weight
        3. Build the order (invariants checked)
        4. Store the order
        """
        with use_case("place_order", order_id=command.order_id, customer_id=command.customer_id):
            order = self.factory.create(
                [(line.product_id, line.quantity) for line in command.lines],
                order_id=command.order_id,
                customer_id=command.customer_id
            )
            self.orders.create(order)

        logger.info(f"Order placed: {order.id} ({len(command.lines)} lines, weight {order.total_weight})")
        return OrderView.from_domain(order)

    def get_order(self, order_id: str) -> OrderView:
        return OrderView.from_domain(self._load(order_id, "get_order"))

    def list_orders(self) -> List[OrderView]:
        return [OrderView.from_domain(order) for order in self.orders.find_all()]

    def add_line_item(self, order_id: str, product_id: str, quantity: int) -> OrderView:
        operation = "add_line_item"
        with use_case(operation, order_id=order_id, product_id=product_id):
            order = self._load(order_id, operation)
            order.add_line_item(self.factory.build_line_item(product_id, quantity))
            self.orders.update(order)
        return OrderView.from_domain(order)

    def change_line_item_quantity(self, order_id: str, product_id: str, quantity: int) -> OrderView:
        operation = "change_line_item_quantity"
        with use_case(operation, order_id=order_id, product_id=product_id, quantity=quantity):
            order = self._load(order_id, operation)
            order.change_line_item_quantity(product_id, quantity)
            self.orders.update(order)
        return OrderView.from_domain(order)

    def remove_line_item(self, order_id: str, product_id: str) -> OrderView:
        operation = "remove_line_item"
        with use_case(operation, order_id=order_id, product_id=product_id):
            order = self._load(order_id, operation)
            order.remove_line_item(product_id)
            self.orders.update(order)
        return OrderView.from_domain(order)

    def confirm_order(self, order_id: str) -> OrderView:
        operation = "confirm_order"
        with use_case(operation, order_id=order_id):
            order = self._load(order_id, operation)
            order.confirm()
            self.orders.update(order)

        logger.info(f"Order confirmed: {order_id}")
        return OrderView.from_domain(order)

    def cancel_order(self, order_id: str) -> OrderView:
        operation = "cancel_order"
        with use_case(operation, order_id=order_id):
            order = self._load(order_id, operation)
            order.cancel()
            self.orders.update(order)

        logger.info(f"Order cancelled: {order_id}")
        return OrderView.from_domain(order)

    def delete_order(self, order_id: str) -> None:
        if not self.orders.delete(order_id):
            raise NotFoundError("Order", order_id, "delete_order")
        logger.info(f"Order deleted: {order_id}")

    def _load(self, order_id: str, operation: str) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id, operation)
        return order
