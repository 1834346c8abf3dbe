"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order aggregates.
An order and its line items are always written in one transaction.

Author: TM3
Date: 2025-10-23
"""
import logging
from collections import defaultdict
from typing import Any, List, Optional

from storefront.domain.exceptions import ConcurrentModificationError
from storefront.domain.order import Order
from storefront.domain.repositories import OrderRepository
from storefront.repositories.base import PostgresRepository
from storefront.repositories.mappers import OrderMapper


logger = logging.getLogger(__name__)


SELECT_ORDERS = """
    SELECT id, customer_id, status, version
    FROM orders
"""

INSERT_LINE_ITEM = """
    INSERT INTO order_line_items (
        id, order_id, position, product_id,
        unit_price_amount, unit_price_currency, unit_weight, quantity
    ) VALUES (
        %(id)s, %(order_id)s, %(position)s, %(product_id)s,
        %(unit_price_amount)s, %(unit_price_currency)s, %(unit_weight)s, %(quantity)s
    )
"""


class PostgresOrderRepository(PostgresRepository, OrderRepository):
    """
    Repository for Order aggregates

    All SQL queries for orders are centralized here.
    Returns Order aggregates with their line items.
    """

    resource = "Order"
    SEARCHABLE_FIELDS = {
        'id': 'id',
        'customer_id': 'customer_id',
        'status': 'status',
    }

    def create(self, order: Order) -> Order:
        with self._cursor("create", order.id) as cursor:
            cursor.execute("""
                INSERT INTO orders (id, customer_id, status, version)
                VALUES (%(id)s, %(customer_id)s, %(status)s, %(version)s)
            """, OrderMapper.to_row(order))
            cursor.executemany(INSERT_LINE_ITEM, OrderMapper.to_line_item_rows(order))

        logger.debug(f"Order {order.id} stored with {len(order.line_items)} line items")
        return order

    def find_by_id(self, order_id: str) -> Optional[Order]:
        """
        Find order by ID with its line items

        Args:
            order_id: Order ID

        Returns:
            Order or None if not found
        """
        return self._find_one("find_by_id", "id", order_id)

    def find_by_field(self, field: str, value: Any) -> Optional[Order]:
        return self._find_one("find_by_field", self._column_for(field), value)

    def find_all(self) -> List[Order]:
        with self._cursor("find_all") as cursor:
            cursor.execute(SELECT_ORDERS + " ORDER BY created_at, id")
            return self._attach_line_items(cursor, cursor.fetchall())

    def update(self, order: Order) -> Order:
        """
        Store order changes if nobody else changed it first

        Raises:
            ConcurrentModificationError: If the stored version is not order.version
        """
        with self._cursor("update", order.id) as cursor:
            cursor.execute("""
                UPDATE orders
                SET customer_id = %(customer_id)s,
                    status = %(status)s,
                    version = version + 1,
                    updated_at = NOW()
                WHERE id = %(id)s AND version = %(version)s
            """, OrderMapper.to_row(order))

            if cursor.rowcount == 0:
                raise ConcurrentModificationError(
                    f"Order {order.id} was modified or deleted since version {order.version}",
                    details={"order_id": order.id, "version": order.version}
                )

            cursor.execute("DELETE FROM order_line_items WHERE order_id = %s", (order.id,))
            cursor.executemany(INSERT_LINE_ITEM, OrderMapper.to_line_item_rows(order))

        order.version += 1
        logger.debug(f"Order {order.id} updated to version {order.version}")
        return order

    def delete(self, order_id: str) -> bool:
        with self._cursor("delete") as cursor:
            cursor.execute("DELETE FROM orders WHERE id = %s", (order_id,))
            return cursor.rowcount > 0

    def _find_one(self, operation: str, column: str, value: Any) -> Optional[Order]:
        with self._cursor(operation) as cursor:
            cursor.execute(SELECT_ORDERS + f" WHERE {column} = %s ORDER BY created_at, id LIMIT 1", (value,))
            row = cursor.fetchone()
            if not row:
                return None
            return self._attach_line_items(cursor, [row])[0]

    @staticmethod
    def _attach_line_items(cursor, rows: List[dict]) -> List[Order]:
        """Load line items for all rows with one query (no N+1)"""
        if not rows:
            return []

        cursor.execute("""
            SELECT
                id, order_id, product_id,
                unit_price_amount, unit_price_currency, unit_weight, quantity
            FROM order_line_items
            WHERE order_id = ANY(%s)
            ORDER BY order_id, position
        """, ([row['id'] for row in rows],))

        lines_by_order = defaultdict(list)
        for line_row in cursor.fetchall():
            lines_by_order[line_row['order_id']].append(line_row)

        return [OrderMapper.from_rows(row, lines_by_order[row['id']]) for row in rows]
