"""
Order Aggregate

An order groups line items, one per product. Line items keep a snapshot of
the product price and weight so the order never holds a reference to
another aggregate, only its identifier.

Author: TM3
Date: 2025-10-21
"""
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Iterable, List, Optional, Tuple

from pydantic import Field, PrivateAttr

from storefront.domain.base import MAX_QUANTITY, AggregateRoot, Entity, new_id
from storefront.domain.exceptions import (
    DuplicateMemberError,
    InvariantViolationError,
    MissingMemberError,
    ValidationError,
)
from storefront.domain.product import Product
from storefront.domain.value_objects import Money, Price


class OrderStatus(str, Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class OrderLineItem(Entity):
    """
    Order line for one product

    Fields:
        id: Line item ID
        product_id: Product catalog ID
        unit_price: Product price at the time the line was added
        unit_weight: Product weight at the time the line was added
        quantity: Units ordered (> 0)
    """

    MAX_WEIGHT: ClassVar[Decimal] = Decimal("100")

    product_id: str = Field(..., description="Product ID")
    unit_price: Price = Field(..., description="Unit price snapshot")
    unit_weight: Decimal = Field(..., max_digits=10, decimal_places=3, description="Unit weight snapshot")
    quantity: int = Field(..., le=MAX_QUANTITY, description="Units ordered")

    def __init__(self, **data):
        super().__init__(**data)
        if self.unit_weight <= 0:
            raise ValidationError(
                f"Line for product {self.product_id} needs a positive unit weight",
                code="invalid_weight",
                details={"product_id": self.product_id, "unit_weight": str(self.unit_weight)}
            )
        self._check_quantity(self.quantity)

    @classmethod
    def for_product(cls, product: Product, quantity: int) -> "OrderLineItem":
        """Build a line from the current price and weight of a product"""
        return cls(
            product_id=product.id,
            unit_price=product.price,
            unit_weight=product.weight,
            quantity=quantity
        )

    @property
    def weight(self) -> Decimal:
        return self.unit_weight * self.quantity

    @property
    def subtotal(self) -> Money:
        return self.unit_price.total_for(self.quantity)

    def change_quantity(self, quantity: int) -> None:
        self._check_quantity(quantity)
        self.quantity = quantity

    def _check_quantity(self, quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(
                f"Quantity for product {self.product_id} must be a positive integer, got {quantity!r}",
                code="invalid_quantity",
                details={"product_id": self.product_id, "quantity": quantity}
            )
        weight = self.unit_weight * quantity
        if weight > self.MAX_WEIGHT:
            raise InvariantViolationError(
                f"Line for product {self.product_id} weighs {weight}, limit is {self.MAX_WEIGHT}",
                code="line_weight_exceeded",
                details={"product_id": self.product_id, "weight": str(weight), "limit": str(self.MAX_WEIGHT)}
            )


class Order(AggregateRoot):
    """
    Order aggregate root

    Invariants (re-checked after every mutation):
        - one line item per product
        - line item ids are unique
        - all line items priced in the same currency
        - total weight does not exceed MAX_TOTAL_WEIGHT

    Lifecycle:
        draft -> confirmed -> cancelled, or draft -> cancelled.
        Line items can only change while the order is a draft.

    Fields:
        id: Order ID
        customer_id: Customer ID (optional)
        status: Order status
        version: Persisted version stamp
    """

    MAX_TOTAL_WEIGHT: ClassVar[Decimal] = Decimal("100")

    id: str = Field(default_factory=new_id, description="Order ID")
    customer_id: Optional[str] = Field(None, description="Customer ID")
    status: OrderStatus = Field(OrderStatus.DRAFT, description="Order status")

    _line_items: List[OrderLineItem] = PrivateAttr(default_factory=list)

    def __init__(self, line_items: Iterable[OrderLineItem] = (), **data):
        super().__init__(**data)
        self._line_items = [item.model_copy(deep=True) for item in line_items]
        self.check_invariants()

    @classmethod
    def create(
        cls,
        line_items: Iterable[OrderLineItem] = (),
        order_id: Optional[str] = None,
        customer_id: Optional[str] = None
    ) -> "Order":
        """Build a new draft order; fails unless every invariant holds"""
        data = {"customer_id": customer_id}
        if order_id is not None:
            data["id"] = order_id
        return cls(line_items=line_items, **data)

    # Read access

    @property
    def line_items(self) -> Tuple[OrderLineItem, ...]:
        """Copies of the line items, in insertion order"""
        return tuple(item.model_copy(deep=True) for item in self._line_items)

    @property
    def total_weight(self) -> Decimal:
        return sum((item.weight for item in self._line_items), Decimal("0"))

    @property
    def total_price(self) -> Optional[Money]:
        """Sum of line subtotals, None for an empty order"""
        if not self._line_items:
            return None
        total = Money.zero(self._line_items[0].unit_price.currency)
        for item in self._line_items:
            total = total.add(item.subtotal)
        return total

    @property
    def is_empty(self) -> bool:
        return not self._line_items

    def line_item_for(self, product_id: str) -> Optional[OrderLineItem]:
        item = self._find_line_item(product_id)
        return item.model_copy(deep=True) if item else None

    # Mutations

    def add_line_item(self, item: OrderLineItem) -> None:
        """
        Append a line item

        Raises:
            DuplicateMemberError: If the product already has a line
            InvariantViolationError: If the order is not a draft or the new
                total weight exceeds the limit (the item is not kept)
        """
        self._ensure_editable()
        if self._find_line_item(item.product_id) is not None:
            raise DuplicateMemberError(
                f"Order {self.id} already has a line for product {item.product_id}",
                code="duplicate_product",
                details={"order_id": self.id, "product_id": item.product_id}
            )
        with self._guarded_mutation():
            self._line_items.append(item.model_copy(deep=True))

    def change_line_item_quantity(self, product_id: str, quantity: int) -> None:
        self._ensure_editable()
        item = self._require_line_item(product_id)
        with self._guarded_mutation():
            item.change_quantity(quantity)

    def remove_line_item(self, product_id: str) -> None:
        self._ensure_editable()
        index = self._line_item_index(product_id)
        with self._guarded_mutation():
            del self._line_items[index]

    def confirm(self) -> None:
        self._ensure_editable()
        if not self._line_items:
            raise InvariantViolationError(
                f"Order {self.id} cannot be confirmed without line items",
                code="empty_order",
                details={"order_id": self.id}
            )
        with self._guarded_mutation():
            self.status = OrderStatus.CONFIRMED

    def cancel(self) -> None:
        if self.status == OrderStatus.CANCELLED:
            raise InvariantViolationError(
                f"Order {self.id} is already cancelled",
                code="order_already_cancelled",
                details={"order_id": self.id}
            )
        with self._guarded_mutation():
            self.status = OrderStatus.CANCELLED

    # Invariants

    def check_invariants(self) -> None:
        product_ids = set()
        line_item_ids = set()
        for item in self._line_items:
            if item.product_id in product_ids:
                raise DuplicateMemberError(
                    f"Order {self.id} has more than one line for product {item.product_id}",
                    code="duplicate_product",
                    details={"order_id": self.id, "product_id": item.product_id}
                )
            if item.id in line_item_ids:
                raise DuplicateMemberError(
                    f"Order {self.id} has more than one line item with id {item.id}",
                    code="duplicate_line_item_id",
                    details={"order_id": self.id, "line_item_id": item.id}
                )
            product_ids.add(item.product_id)
            line_item_ids.add(item.id)

        currencies = {item.unit_price.currency for item in self._line_items}
        if len(currencies) > 1:
            raise InvariantViolationError(
                f"Order {self.id} mixes currencies: {', '.join(sorted(currencies))}",
                code="currency_mismatch",
                details={"order_id": self.id, "currencies": sorted(currencies)}
            )

        total_weight = self.total_weight
        if total_weight > self.MAX_TOTAL_WEIGHT:
            raise InvariantViolationError(
                f"Order {self.id} total weight exceeds limit: {total_weight} > {self.MAX_TOTAL_WEIGHT}",
                code="weight_limit_exceeded",
                details={
                    "order_id": self.id,
                    "total_weight": str(total_weight),
                    "limit": str(self.MAX_TOTAL_WEIGHT)
                }
            )

    def _ensure_editable(self) -> None:
        if self.status != OrderStatus.DRAFT:
            raise InvariantViolationError(
                f"Order {self.id} is {self.status.value} and can no longer be changed",
                code="order_not_editable",
                details={"order_id": self.id, "status": self.status.value}
            )

    def _find_line_item(self, product_id: str) -> Optional[OrderLineItem]:
        for item in self._line_items:
            if item.product_id == product_id:
                return item
        return None

    def _require_line_item(self, product_id: str) -> OrderLineItem:
        return self._line_items[self._line_item_index(product_id)]

    def _line_item_index(self, product_id: str) -> int:
        for index, item in enumerate(self._line_items):
            if item.product_id == product_id:
                return index
        raise MissingMemberError(
            f"Order {self.id} has no line for product {product_id}",
            code="unknown_line_item",
            details={"order_id": self.id, "product_id": product_id}
        )
