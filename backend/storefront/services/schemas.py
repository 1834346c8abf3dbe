"""
Use case input and output shapes

Commands carry raw primitives into the services; views carry aggregate
state back out. Both are plain data with no behaviour.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.domain.order import Order, OrderLineItem
from storefront.domain.product import Product, Stock
from storefront.domain.user import User
from storefront.domain.value_objects import Money


# =============================================================================
# Commands
# =============================================================================

class StockInput(BaseModel):
    longitude: float
    latitude: float
    quantity: int = 0


class CreateProductCommand(BaseModel):
    """Schema for creating a new product"""
    product_id: str
    price_amount: Decimal
    currency: str = "USD"
    weight: Decimal
    stocks: List[StockInput] = Field(default_factory=list)


class OrderLineInput(BaseModel):
    product_id: str
    quantity: int


class PlaceOrderCommand(BaseModel):
    """Schema for placing a new order"""
    order_id: Optional[str] = None
    customer_id: Optional[str] = None
    lines: List[OrderLineInput] = Field(default_factory=list)


class RegisterUserCommand(BaseModel):
    """Schema for registering a new user"""
    email: str
    password: str
    name: Optional[str] = None


# =============================================================================
# Views
# =============================================================================

class MoneyView(BaseModel):
    amount: Decimal
    currency: str

    @classmethod
    def from_money(cls, money: Money) -> "MoneyView":
        return cls(amount=money.amount, currency=money.currency)


class StockView(BaseModel):
    id: str
    longitude: float
    latitude: float
    quantity: int

    @classmethod
    def from_domain(cls, stock: Stock) -> "StockView":
        return cls(
            id=stock.id,
            longitude=stock.location.longitude,
            latitude=stock.location.latitude,
            quantity=stock.quantity
        )


class ProductView(BaseModel):
    id: str
    price: MoneyView
    weight: Decimal
    total_quantity: int
    stocks: List[StockView]
    version: int

    @classmethod
    def from_domain(cls, product: Product) -> "ProductView":
        return cls(
            id=product.id,
            price=MoneyView.from_money(product.price),
            weight=product.weight,
            total_quantity=product.total_quantity,
            stocks=[StockView.from_domain(stock) for stock in product.stocks],
            version=product.version
        )


class LineItemView(BaseModel):
    id: str
    product_id: str
    quantity: int
    unit_price: MoneyView
    unit_weight: Decimal
    weight: Decimal
    subtotal: MoneyView

    @classmethod
    def from_domain(cls, item: OrderLineItem) -> "LineItemView":
        return cls(
            id=item.id,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=MoneyView.from_money(item.unit_price),
            unit_weight=item.unit_weight,
            weight=item.weight,
            subtotal=MoneyView.from_money(item.subtotal)
        )


class OrderView(BaseModel):
    id: str
    customer_id: Optional[str]
    status: str
    line_items: List[LineItemView]
    item_count: int
    total_weight: Decimal
    total_price: Optional[MoneyView]
    version: int

    @classmethod
    def from_domain(cls, order: Order) -> "OrderView":
        total_price = order.total_price
        line_items = order.line_items
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            status=order.status.value,
            line_items=[LineItemView.from_domain(item) for item in line_items],
            item_count=len(line_items),
            total_weight=order.total_weight,
            total_price=MoneyView.from_money(total_price) if total_price else None,
            version=order.version
        )


class UserView(BaseModel):
    id: str
    email: str
    name: Optional[str]
    is_active: bool
    version: int

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            email=user.email.value,
            name=user.name,
            is_active=user.is_active,
            version=user.version
        )
