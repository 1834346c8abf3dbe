"""
Domain Layer - Business Entities

Value objects, entities and aggregates that enforce the business rules,
plus the repository contracts they are persisted through.

Author: TM3
Date: 2025-10-21
"""
from storefront.domain.exceptions import (
    ErrorKind,
    DomainError,
    ValidationError,
    InvariantViolationError,
    DuplicateMemberError,
    MissingMemberError,
    AlreadyExistsError,
    ConcurrentModificationError,
)
from storefront.domain.value_objects import Email, Password, Money, Price, Location
from storefront.domain.product import Product, Stock
from storefront.domain.order import Order, OrderLineItem, OrderStatus
from storefront.domain.user import User
from storefront.domain.factories import OrderFactory

__all__ = [
    'ErrorKind',
    'DomainError',
    'ValidationError',
    'InvariantViolationError',
    'DuplicateMemberError',
    'MissingMemberError',
    'AlreadyExistsError',
    'ConcurrentModificationError',
    'Email',
    'Password',
    'Money',
    'Price',
    'Location',
    'Product',
    'Stock',
    'Order',
    'OrderLineItem',
    'OrderStatus',
    'User',
    'OrderFactory',
]
