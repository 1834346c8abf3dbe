"""
Product Aggregate

A product is sold at one price, has a unit weight and is stocked at one or
more locations. The Product root is the only way to change its stocks.

Author: TM3
Date: 2025-10-21
"""
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from pydantic import Field, PrivateAttr

from storefront.domain.base import MAX_QUANTITY, AggregateRoot, Entity
from storefront.domain.exceptions import (
    DuplicateMemberError,
    InvariantViolationError,
    MissingMemberError,
    ValidationError,
)
from storefront.domain.value_objects import Location, Price


def _require_positive(quantity: int, action: str) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(
            f"Cannot {action} stock by {quantity!r}: quantity must be a positive integer",
            code="invalid_quantity",
            details={"quantity": quantity}
        )


class Stock(Entity):
    """
    Units of a product held at one location

    Fields:
        id: Stock entry ID
        location: Where the units are held
        quantity: Units available (never negative)
    """

    location: Location = Field(..., description="Stock location")
    quantity: int = Field(0, ge=0, le=MAX_QUANTITY, description="Units available")

    def increase(self, quantity: int) -> None:
        _require_positive(quantity, "increase")
        self.quantity = self.quantity + quantity

    def decrease(self, quantity: int) -> None:
        _require_positive(quantity, "decrease")
        if quantity > self.quantity:
            raise InvariantViolationError(
                f"Cannot take {quantity} units from {self.location}: only {self.quantity} available",
                code="insufficient_stock",
                details={"requested": quantity, "available": self.quantity}
            )
        self.quantity = self.quantity - quantity


class Product(AggregateRoot):
    """
    Product aggregate root

    Invariants:
        - id is not empty
        - weight is greater than zero
        - at least one stock entry
        - at most one stock entry per location
        - stock entry ids are unique

    Fields:
        id: Product identifier (SKU)
        price: Unit price
        weight: Unit weight in weight-units
        version: Persisted version stamp
    """

    id: str = Field(..., description="Product identifier")
    price: Price = Field(..., description="Unit price")
    weight: Decimal = Field(..., max_digits=10, decimal_places=3, description="Unit weight")

    _stocks: List[Stock] = PrivateAttr(default_factory=list)

    def __init__(self, stocks: Iterable[Stock] = (), **data):
        super().__init__(**data)
        self._stocks = [stock.model_copy(deep=True) for stock in stocks]
        self.check_invariants()

    @classmethod
    def create(
        cls,
        product_id: str,
        price: Price,
        weight: Decimal,
        stocks: Iterable[Stock]
    ) -> "Product":
        """Build a new product; fails unless every invariant holds"""
        return cls(id=product_id, price=price, weight=weight, stocks=stocks)

    # Read access

    @property
    def stocks(self) -> Tuple[Stock, ...]:
        """Copies of the stock entries, in insertion order"""
        return tuple(stock.model_copy(deep=True) for stock in self._stocks)

    @property
    def total_quantity(self) -> int:
        return sum(stock.quantity for stock in self._stocks)

    def stock_at(self, location: Location) -> Optional[Stock]:
        for stock in self._stocks:
            if stock.location == location:
                return stock.model_copy(deep=True)
        return None

    # Mutations

    def add_stock(self, stock: Stock) -> None:
        """
        Register stock at a new location

        Raises:
            DuplicateMemberError: If the location already has a stock entry
        """
        if any(existing.location == stock.location for existing in self._stocks):
            raise DuplicateMemberError(
                f"Product {self.id} already has stock at {stock.location}",
                code="duplicate_location",
                details={"product_id": self.id, "location": stock.location.model_dump()}
            )
        with self._guarded_mutation():
            self._stocks.append(stock.model_copy(deep=True))

    def remove_stock(self, location: Location) -> None:
        """Drop the stock entry at a location (the last one cannot be removed)"""
        index = self._stock_index(location)
        with self._guarded_mutation():
            del self._stocks[index]

    def increase_stock(self, location: Location, quantity: int) -> None:
        stock = self._find_stock(location)
        with self._guarded_mutation():
            stock.increase(quantity)

    def decrease_stock(self, location: Location, quantity: int) -> None:
        stock = self._find_stock(location)
        with self._guarded_mutation():
            stock.decrease(quantity)

    def change_price(self, price: Price) -> None:
        if not isinstance(price, Price):
            raise ValidationError(
                f"Product price must be a Price, got {type(price).__name__}",
                code="invalid_price"
            )
        with self._guarded_mutation():
            self.price = price

    # Invariants

    def check_invariants(self) -> None:
        if not self.id or not self.id.strip():
            raise InvariantViolationError("Product id must not be empty", code="missing_id")
        if self.weight <= 0:
            raise InvariantViolationError(
                f"Product {self.id} weight must be greater than zero, got {self.weight}",
                code="invalid_weight",
                details={"product_id": self.id, "weight": str(self.weight)}
            )
        if not self._stocks:
            raise InvariantViolationError(
                f"Product {self.id} must have at least one stock entry",
                code="missing_stock",
                details={"product_id": self.id}
            )
        seen: List[Location] = []
        stock_ids = set()
        for stock in self._stocks:
            if stock.location in seen:
                raise DuplicateMemberError(
                    f"Product {self.id} has more than one stock entry at {stock.location}",
                    code="duplicate_location",
                    details={"product_id": self.id, "location": stock.location.model_dump()}
                )
            if stock.id in stock_ids:
                raise DuplicateMemberError(
                    f"Product {self.id} has more than one stock entry with id {stock.id}",
                    code="duplicate_stock_id",
                    details={"product_id": self.id, "stock_id": stock.id}
                )
            seen.append(stock.location)
            stock_ids.add(stock.id)

    def _find_stock(self, location: Location) -> Stock:
        return self._stocks[self._stock_index(location)]

    def _stock_index(self, location: Location) -> int:
        for index, stock in enumerate(self._stocks):
            if stock.location == location:
                return index
        raise MissingMemberError(
            f"Product {self.id} has no stock at {location}",
            code="unknown_location",
            details={"product_id": self.id, "location": location.model_dump()}
        )
