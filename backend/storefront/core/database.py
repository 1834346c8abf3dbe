"""
Conexión a base de datos PostgreSQL

psycopg2 connections with retry logic and a transaction helper used by the
repositories. The retry policy comes from settings (DB_CONNECT_RETRIES,
DB_RETRY_DELAY).

Author: TM3
Updated: 2025-10-22
"""
import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2.extras import RealDictCursor

from .config import settings


logger = logging.getLogger(__name__)


class DatabaseNotConfiguredError(RuntimeError):
    """DATABASE_URL is empty"""


def get_db_connection_with_retry(
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None
):
    """
    Get a psycopg2 connection (RealDictCursor) with retry on connection failures

    Handles intermittent connection issues by:
    - Retrying failed connections up to max_retries times
    - Adding exponential backoff between retries
    - Logging connection attempts for debugging

    Args:
        max_retries: Maximum number of connection attempts (default: settings.DB_CONNECT_RETRIES)
        retry_delay: Initial delay between retries in seconds (default: settings.DB_RETRY_DELAY)

    Returns:
        psycopg2 connection with RealDictCursor

    Raises:
        DatabaseNotConfiguredError: If DATABASE_URL is empty
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise DatabaseNotConfiguredError("DATABASE_URL not configured")

    max_retries = max(1, max_retries if max_retries is not None else settings.DB_CONNECT_RETRIES)
    retry_delay = retry_delay if retry_delay is not None else settings.DB_RETRY_DELAY

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(database_url, cursor_factory=RealDictCursor)
            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            # Don't retry on last attempt
            if attempt == max_retries:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

            # Exponential backoff
            delay = retry_delay * (2 ** (attempt - 1))
            logger.info(f"Retrying in {delay:.2f} seconds...")
            time.sleep(delay)


@contextmanager
def transaction() -> Iterator:
    """
    Connection scoped to one unit of work

    Commits when the block finishes, rolls back if it raises, and always
    closes the connection.

    Example:
        with transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("UPDATE products SET ...")
            cursor.close()
    """
    conn = get_db_connection_with_retry()
    try:
        yield conn
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()
