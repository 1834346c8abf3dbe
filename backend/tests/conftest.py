"""
Pytest fixtures and configuration for Storefront backend tests

This file provides shared fixtures that can be used across all test modules.

Author: TM3
Date: 2025-10-24
"""
import pytest
from fastapi.testclient import TestClient

from fakes import (
    InMemoryOrderRepository,
    InMemoryProductRepository,
    InMemoryUserRepository,
    build_product,
)
from storefront.api.dependencies import (
    get_order_repository,
    get_product_repository,
    get_user_repository,
)
from storefront.core.context import reset_correlation_id, set_correlation_id
from storefront.services import OrderService, ProductService, UserService


@pytest.fixture
def sample_product():
    """
    Provides a valid product: 10.00 USD, weight 5, 5 units at (10, 20)
    """
    return build_product()


@pytest.fixture
def product_repository():
    return InMemoryProductRepository()


@pytest.fixture
def order_repository():
    return InMemoryOrderRepository()


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def product_service(product_repository):
    return ProductService(product_repository)


@pytest.fixture
def order_service(order_repository, product_repository):
    return OrderService(order_repository, product_repository)


@pytest.fixture
def user_service(user_repository):
    return UserService(user_repository)


@pytest.fixture
def correlation_id():
    """Sets a known correlation id for the duration of a test"""
    token = set_correlation_id("test-correlation-id")
    yield "test-correlation-id"
    reset_correlation_id(token)


@pytest.fixture
def app(product_repository, order_repository, user_repository):
    """
    Provides a fresh application wired to in-memory repositories

    Scope: function (new app and storage per test)
    """
    from storefront.main import create_app

    application = create_app()
    application.dependency_overrides[get_product_repository] = lambda: product_repository
    application.dependency_overrides[get_order_repository] = lambda: order_repository
    application.dependency_overrides[get_user_repository] = lambda: user_repository
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
