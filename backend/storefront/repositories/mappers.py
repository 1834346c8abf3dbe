"""
Row Mappers

Translate between aggregates and the rows of the PostgreSQL schema
(migrations/001_initial_schema.sql). Aggregates rebuilt from rows go
through their constructors, so stored state is re-validated on load.

Author: TM3
Date: 2025-10-23
"""
from typing import Iterable, List

from storefront.domain.order import Order, OrderLineItem
from storefront.domain.product import Product, Stock
from storefront.domain.user import User
from storefront.domain.value_objects import Email, Location, Price


class ProductMapper:
    """products + product_stocks"""

    @staticmethod
    def to_row(product: Product) -> dict:
        return {
            'id': product.id,
            'price_amount': product.price.amount,
            'price_currency': product.price.currency,
            'weight': product.weight,
            'version': product.version,
        }

    @staticmethod
    def to_stock_rows(product: Product) -> List[dict]:
        return [
            {
                'id': stock.id,
                'product_id': product.id,
                'position': position,
                'longitude': stock.location.longitude,
                'latitude': stock.location.latitude,
                'quantity': stock.quantity,
            }
            for position, stock in enumerate(product.stocks)
        ]

    @staticmethod
    def from_rows(row: dict, stock_rows: Iterable[dict]) -> Product:
        stocks = [
            Stock(
                id=stock_row['id'],
                location=Location(longitude=stock_row['longitude'], latitude=stock_row['latitude']),
                quantity=stock_row['quantity']
            )
            for stock_row in stock_rows
        ]
        return Product(
            id=row['id'],
            price=Price(amount=row['price_amount'], currency=row['price_currency']),
            weight=row['weight'],
            version=row['version'],
            stocks=stocks
        )


class OrderMapper:
    """orders + order_line_items"""

    @staticmethod
    def to_row(order: Order) -> dict:
        return {
            'id': order.id,
            'customer_id': order.customer_id,
            'status': order.status.value,
            'version': order.version,
        }

    @staticmethod
    def to_line_item_rows(order: Order) -> List[dict]:
        return [
            {
                'id': item.id,
                'order_id': order.id,
                'position': position,
                'product_id': item.product_id,
                'unit_price_amount': item.unit_price.amount,
                'unit_price_currency': item.unit_price.currency,
                'unit_weight': item.unit_weight,
                'quantity': item.quantity,
            }
            for position, item in enumerate(order.line_items)
        ]

    @staticmethod
    def from_rows(row: dict, line_rows: Iterable[dict]) -> Order:
        line_items = [
            OrderLineItem(
                id=line_row['id'],
                product_id=line_row['product_id'],
                unit_price=Price(
                    amount=line_row['unit_price_amount'],
                    currency=line_row['unit_price_currency']
                ),
                unit_weight=line_row['unit_weight'],
                quantity=line_row['quantity']
            )
            for line_row in line_rows
        ]
        return Order(
            id=row['id'],
            customer_id=row.get('customer_id'),
            status=row['status'],
            version=row['version'],
            line_items=line_items
        )


class UserMapper:
    """users"""

    @staticmethod
    def to_row(user: User) -> dict:
        return {
            'id': user.id,
            'email': user.email.value,
            'password_hash': user.password_hash,
            'name': user.name,
            'is_active': user.is_active,
            'version': user.version,
        }

    @staticmethod
    def from_row(row: dict) -> User:
        return User(
            id=row['id'],
            email=Email(value=row['email']),
            password_hash=row['password_hash'],
            name=row.get('name'),
            is_active=row['is_active'],
            version=row['version']
        )
