"""
Repository Layer - Data Access

This layer handles all database queries and returns domain aggregates.
Repositories implement the contracts in storefront.domain.repositories.

Author: TM3
Date: 2025-10-23
"""
from storefront.repositories.errors import InfrastructureError
from storefront.repositories.product_repository import PostgresProductRepository
from storefront.repositories.order_repository import PostgresOrderRepository
from storefront.repositories.user_repository import PostgresUserRepository

__all__ = [
    'InfrastructureError',
    'PostgresProductRepository',
    'PostgresOrderRepository',
    'PostgresUserRepository',
]
