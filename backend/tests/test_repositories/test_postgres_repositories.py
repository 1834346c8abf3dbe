"""
Unit tests for the PostgreSQL repositories

These tests validate repository logic without requiring a database connection.

Author: TM3
Date: 2025-10-24
"""
from decimal import Decimal
from unittest.mock import MagicMock, patch

import psycopg2
import pytest
from psycopg2 import errors as pg_errors

from fakes import build_line_item, build_product
from storefront.core.database import DatabaseNotConfiguredError
from storefront.domain.exceptions import AlreadyExistsError, ConcurrentModificationError
from storefront.domain.order import Order, OrderStatus
from storefront.domain.product import Product
from storefront.domain.user import User
from storefront.domain.value_objects import Email
from storefront.repositories import (
    InfrastructureError,
    PostgresOrderRepository,
    PostgresProductRepository,
    PostgresUserRepository,
)


CONNECT = 'storefront.core.database.get_db_connection_with_retry'


def mock_connection(mock_get_conn):
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor


class TestPostgresProductRepository:
    """Test PostgresProductRepository methods"""

    @patch(CONNECT)
    def test_find_by_id_returns_product(self, mock_get_conn):
        """Test find_by_id returns a Product aggregate with its stocks"""
        # Arrange: Mock database connection
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {
            'id': 'BAKC_U04010',
            'price_amount': Decimal('1500.00'),
            'price_currency': 'USD',
            'weight': Decimal('0.5'),
            'version': 3,
        }
        mock_cursor.fetchall.return_value = [
            {'id': 's1', 'product_id': 'BAKC_U04010', 'longitude': 10.0, 'latitude': 20.0, 'quantity': 4},
            {'id': 's2', 'product_id': 'BAKC_U04010', 'longitude': -70.6, 'latitude': -33.4, 'quantity': 6},
        ]

        # Act: Call repository method
        product = PostgresProductRepository().find_by_id('BAKC_U04010')

        # Assert: Verify result
        assert isinstance(product, Product)
        assert product.version == 3
        assert product.price.amount == Decimal('1500.00')
        assert [stock.id for stock in product.stocks] == ['s1', 's2']
        assert product.total_quantity == 10

        # Stocks are loaded with one query
        assert mock_cursor.execute.call_count == 2
        mock_cursor.close.assert_called_once()
        mock_conn.commit.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch(CONNECT)
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert PostgresProductRepository().find_by_id('missing') is None
        mock_cursor.execute.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch(CONNECT)
    def test_find_all_loads_stocks_in_one_query(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchall.side_effect = [
            [
                {'id': 'A', 'price_amount': Decimal('1'), 'price_currency': 'USD', 'weight': Decimal('1'), 'version': 0},
                {'id': 'B', 'price_amount': Decimal('2'), 'price_currency': 'EUR', 'weight': Decimal('2'), 'version': 1},
            ],
            [
                {'id': 's1', 'product_id': 'A', 'longitude': 1.0, 'latitude': 1.0, 'quantity': 1},
                {'id': 's2', 'product_id': 'B', 'longitude': 2.0, 'latitude': 2.0, 'quantity': 2},
            ],
        ]

        products = PostgresProductRepository().find_all()

        assert [product.id for product in products] == ['A', 'B']
        assert products[1].stocks[0].id == 's2'
        assert mock_cursor.execute.call_count == 2
        assert mock_cursor.execute.call_args[0][1] == (['A', 'B'],)

    @patch(CONNECT)
    def test_create_writes_product_and_stocks(self, mock_get_conn):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        product = build_product(locations=((10.0, 20.0, 5), (11.0, 21.0, 1)))

        PostgresProductRepository().create(product)

        params = mock_cursor.execute.call_args[0][1]
        assert params['id'] == product.id
        assert params['price_currency'] == 'USD'
        stock_rows = mock_cursor.executemany.call_args[0][1]
        assert [row['position'] for row in stock_rows] == [0, 1]
        mock_conn.commit.assert_called_once()

    @patch(CONNECT)
    def test_create_duplicate_id(self, mock_get_conn):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = pg_errors.UniqueViolation("duplicate key")

        with pytest.raises(AlreadyExistsError):
            PostgresProductRepository().create(build_product())

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    @patch(CONNECT)
    def test_update_advances_version(self, mock_get_conn):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1
        product = build_product()

        PostgresProductRepository().update(product)

        assert product.version == 1
        update_params = mock_cursor.execute.call_args_list[0][0][1]
        assert update_params['version'] == 0
        mock_cursor.executemany.assert_called_once()
        mock_conn.commit.assert_called_once()

    @patch(CONNECT)
    def test_update_stale_version(self, mock_get_conn):
        """Test update raises when the stored version moved on"""
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0
        product = build_product()

        with pytest.raises(ConcurrentModificationError):
            PostgresProductRepository().update(product)

        assert product.version == 0
        mock_cursor.executemany.assert_not_called()
        mock_conn.rollback.assert_called_once()

    @patch(CONNECT)
    def test_delete(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        assert PostgresProductRepository().delete('missing') is False

    def test_find_by_unknown_field(self):
        with pytest.raises(ValueError):
            PostgresProductRepository().find_by_field('name', 'x')

    @patch(CONNECT)
    def test_find_by_field_uses_column(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        PostgresProductRepository().find_by_field('currency', 'EUR')

        sql, params = mock_cursor.execute.call_args[0]
        assert 'price_currency = %s' in sql
        assert params == ('EUR',)


class TestStorageFailures:
    """Test driver failures become InfrastructureError"""

    @patch(CONNECT)
    def test_connection_failure(self, mock_get_conn):
        mock_get_conn.side_effect = psycopg2.OperationalError("password authentication failed for user x")

        with pytest.raises(InfrastructureError) as exc_info:
            PostgresOrderRepository().find_all()

        error = exc_info.value
        assert error.operation == 'order_repository.find_all'
        assert error.code == 'storage_unavailable'
        assert 'password' not in error.message

    @patch(CONNECT)
    def test_not_configured(self, mock_get_conn):
        mock_get_conn.side_effect = DatabaseNotConfiguredError("DATABASE_URL not configured")

        with pytest.raises(InfrastructureError) as exc_info:
            PostgresUserRepository().find_by_id('U-1')

        assert exc_info.value.code == 'storage_not_configured'

    @patch(CONNECT)
    def test_query_failure_rolls_back(self, mock_get_conn):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg2.DatabaseError("relation does not exist")

        with pytest.raises(InfrastructureError):
            PostgresOrderRepository().delete('O-1')

        mock_conn.rollback.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()


class TestPostgresOrderRepository:
    """Test PostgresOrderRepository methods"""

    @patch(CONNECT)
    def test_find_by_id_returns_order(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'id': 'O-1', 'customer_id': 'C-1', 'status': 'confirmed', 'version': 2}
        mock_cursor.fetchall.return_value = [{
            'id': 'l1',
            'order_id': 'O-1',
            'product_id': 'A',
            'unit_price_amount': Decimal('3.00'),
            'unit_price_currency': 'USD',
            'unit_weight': Decimal('10'),
            'quantity': 2,
        }]

        order = PostgresOrderRepository().find_by_id('O-1')

        assert isinstance(order, Order)
        assert order.status == OrderStatus.CONFIRMED
        assert order.version == 2
        assert order.total_weight == Decimal('20')

    @patch(CONNECT)
    def test_update_rewrites_line_items(self, mock_get_conn):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1
        order = Order.create(
            line_items=[build_line_item(product_id='A'), build_line_item(product_id='B')],
            order_id='O-1'
        )

        PostgresOrderRepository().update(order)

        statements = [call[0][0] for call in mock_cursor.execute.call_args_list]
        assert 'UPDATE orders' in statements[0]
        assert 'DELETE FROM order_line_items' in statements[1]
        line_rows = mock_cursor.executemany.call_args[0][1]
        assert [row['product_id'] for row in line_rows] == ['A', 'B']
        assert order.version == 1
        mock_conn.commit.assert_called_once()

    @patch(CONNECT)
    def test_update_stale_version(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(ConcurrentModificationError):
            PostgresOrderRepository().update(Order.create(order_id='O-1'))


class TestPostgresUserRepository:
    """Test PostgresUserRepository methods"""

    @patch(CONNECT)
    def test_find_by_email(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {
            'id': 'U-1',
            'email': 'buyer@example.com',
            'password_hash': 'hash',
            'name': None,
            'is_active': True,
            'version': 0,
        }

        user = PostgresUserRepository().find_by_field('email', 'buyer@example.com')

        assert isinstance(user, User)
        assert user.email == Email(value='buyer@example.com')
        sql, params = mock_cursor.execute.call_args[0]
        assert 'email = %s' in sql
        assert params == ('buyer@example.com',)

    @patch(CONNECT)
    def test_create_duplicate_email(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = pg_errors.UniqueViolation("duplicate key value violates users_email_key")
        user = User(email=Email(value='buyer@example.com'), password_hash='hash')

        with pytest.raises(AlreadyExistsError):
            PostgresUserRepository().create(user)
