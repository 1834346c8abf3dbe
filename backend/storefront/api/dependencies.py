"""
FastAPI dependencies wiring repositories into services

Tests replace the repository providers through app.dependency_overrides.
"""
from fastapi import Depends

from storefront.domain.repositories import OrderRepository, ProductRepository, UserRepository
from storefront.repositories import (
    PostgresOrderRepository,
    PostgresProductRepository,
    PostgresUserRepository,
)
from storefront.services import OrderService, ProductService, UserService


def get_product_repository() -> ProductRepository:
    return PostgresProductRepository()


def get_order_repository() -> OrderRepository:
    return PostgresOrderRepository()


def get_user_repository() -> UserRepository:
    return PostgresUserRepository()


def get_product_service(
    products: ProductRepository = Depends(get_product_repository)
) -> ProductService:
    return ProductService(products)


def get_order_service(
    orders: OrderRepository = Depends(get_order_repository),
    products: ProductRepository = Depends(get_product_repository)
) -> OrderService:
    return OrderService(orders, products)


def get_user_service(
    users: UserRepository = Depends(get_user_repository)
) -> UserService:
    return UserService(users)
