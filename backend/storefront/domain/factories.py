"""
Order Factory

Builds orders from (product_id, quantity) pairs when the products still
have to be loaded. Keeps repositories out of the Order aggregate.

Author: TM3
Date: 2025-10-22
"""
from typing import Iterable, Optional, Tuple

from storefront.domain.exceptions import MissingMemberError
from storefront.domain.order import Order, OrderLineItem
from storefront.domain.repositories import ProductRepository


class OrderFactory:
    """Resolve referenced products, then delegate to Order.create()"""

    def __init__(self, products: ProductRepository):
        self.products = products

    def create(
        self,
        lines: Iterable[Tuple[str, int]],
        order_id: Optional[str] = None,
        customer_id: Optional[str] = None
    ) -> Order:
        """
        Build a draft order

        Args:
            lines: (product_id, quantity) pairs
            order_id: Order ID (generated when omitted)
            customer_id: Customer ID (optional)

        Returns:
            Order that satisfies every invariant

        Raises:
            MissingMemberError: If a product does not exist
            DomainError: If the resulting order breaks an invariant
        """
        line_items = [self.build_line_item(product_id, quantity) for product_id, quantity in lines]
        return Order.create(line_items=line_items, order_id=order_id, customer_id=customer_id)

    def build_line_item(self, product_id: str, quantity: int) -> OrderLineItem:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise MissingMemberError(
                f"Product {product_id} does not exist",
                code="unknown_product",
                details={"product_id": product_id}
            )
        return OrderLineItem.for_product(product, quantity)
