"""
Services Layer - Use Cases

Each public service method is one named operation: build value objects,
load aggregates, call aggregate methods, persist, return a view.
"""
from storefront.services.errors import ApplicationError, NotFoundError, use_case
from storefront.services.product_service import ProductService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

__all__ = [
    'ApplicationError',
    'NotFoundError',
    'use_case',
    'ProductService',
    'OrderService',
    'UserService',
]
