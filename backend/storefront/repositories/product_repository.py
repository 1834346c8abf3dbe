"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product aggregates.
A product and its stock entries are always written in one transaction.

Author: TM3
Date: 2025-10-23
"""
import logging
from collections import defaultdict
from typing import Any, List, Optional

from storefront.domain.exceptions import ConcurrentModificationError
from storefront.domain.product import Product
from storefront.domain.repositories import ProductRepository
from storefront.repositories.base import PostgresRepository
from storefront.repositories.mappers import ProductMapper


logger = logging.getLogger(__name__)


SELECT_PRODUCTS = """
    SELECT id, price_amount, price_currency, weight, version
    FROM products
"""

INSERT_STOCK = """
    INSERT INTO product_stocks (id, product_id, position, longitude, latitude, quantity)
    VALUES (%(id)s, %(product_id)s, %(position)s, %(longitude)s, %(latitude)s, %(quantity)s)
"""


class PostgresProductRepository(PostgresRepository, ProductRepository):
    """
    Repository for Product aggregates

    All SQL queries for products are centralized here.
    Returns Product aggregates, not raw dictionaries.
    """

    resource = "Product"
    SEARCHABLE_FIELDS = {
        'id': 'id',
        'currency': 'price_currency',
    }

    def create(self, product: Product) -> Product:
        with self._cursor("create", product.id) as cursor:
            cursor.execute("""
                INSERT INTO products (id, price_amount, price_currency, weight, version)
                VALUES (%(id)s, %(price_amount)s, %(price_currency)s, %(weight)s, %(version)s)
            """, ProductMapper.to_row(product))
            cursor.executemany(INSERT_STOCK, ProductMapper.to_stock_rows(product))

        logger.debug(f"Product {product.id} stored")
        return product

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Product identifier

        Returns:
            Product or None if not found
        """
        return self._find_one("find_by_id", "id", product_id)

    def find_by_field(self, field: str, value: Any) -> Optional[Product]:
        return self._find_one("find_by_field", self._column_for(field), value)

    def find_all(self) -> List[Product]:
        with self._cursor("find_all") as cursor:
            cursor.execute(SELECT_PRODUCTS + " ORDER BY id")
            return self._attach_stocks(cursor, cursor.fetchall())

    def update(self, product: Product) -> Product:
        """
        Store product changes if nobody else changed it first

        Raises:
            ConcurrentModificationError: If the stored version is not product.version
        """
        with self._cursor("update", product.id) as cursor:
            cursor.execute("""
                UPDATE products
                SET price_amount = %(price_amount)s,
                    price_currency = %(price_currency)s,
                    weight = %(weight)s,
                    version = version + 1
                WHERE id = %(id)s AND version = %(version)s
            """, ProductMapper.to_row(product))

            if cursor.rowcount == 0:
                raise ConcurrentModificationError(
                    f"Product {product.id} was modified or deleted since version {product.version}",
                    details={"product_id": product.id, "version": product.version}
                )

            cursor.execute("DELETE FROM product_stocks WHERE product_id = %s", (product.id,))
            cursor.executemany(INSERT_STOCK, ProductMapper.to_stock_rows(product))

        product.version += 1
        logger.debug(f"Product {product.id} updated to version {product.version}")
        return product

    def delete(self, product_id: str) -> bool:
        with self._cursor("delete") as cursor:
            cursor.execute("DELETE FROM products WHERE id = %s", (product_id,))
            return cursor.rowcount > 0

    def _find_one(self, operation: str, column: str, value: Any) -> Optional[Product]:
        with self._cursor(operation) as cursor:
            cursor.execute(SELECT_PRODUCTS + f" WHERE {column} = %s ORDER BY id LIMIT 1", (value,))
            row = cursor.fetchone()
            if not row:
                return None
            return self._attach_stocks(cursor, [row])[0]

    @staticmethod
    def _attach_stocks(cursor, rows: List[dict]) -> List[Product]:
        """Load stocks for all rows with one query (no N+1)"""
        if not rows:
            return []

        cursor.execute("""
            SELECT id, product_id, longitude, latitude, quantity
            FROM product_stocks
            WHERE product_id = ANY(%s)
            ORDER BY product_id, position
        """, ([row['id'] for row in rows],))

        stocks_by_product = defaultdict(list)
        for stock_row in cursor.fetchall():
            stocks_by_product[stock_row['product_id']].append(stock_row)

        return [ProductMapper.from_rows(row, stocks_by_product[row['id']]) for row in rows]
