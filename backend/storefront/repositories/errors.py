"""
Infrastructure Errors

Storage failures are wrapped into InfrastructureError with the repository
operation that failed. The driver message is logged, never re-exposed.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2

from storefront.core.context import get_correlation_id
from storefront.core.database import DatabaseNotConfiguredError
from storefront.domain.exceptions import ErrorKind


logger = logging.getLogger(__name__)


class InfrastructureError(Exception):
    """Storage or network failure below the repository contract"""

    kind = ErrorKind.INFRASTRUCTURE

    def __init__(
        self,
        message: str,
        operation: str,
        code: str = "storage_unavailable",
        correlation_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.code = code
        self.correlation_id = correlation_id or get_correlation_id()

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "operation": self.operation,
            "correlation_id": self.correlation_id,
        }


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Wrap driver and configuration failures raised inside the block"""
    try:
        yield
    except DatabaseNotConfiguredError as exc:
        logger.error(f"{operation} failed: {exc}")
        raise InfrastructureError(
            "Storage is not configured",
            operation=operation,
            code="storage_not_configured"
        ) from exc
    except psycopg2.Error as exc:
        logger.error(f"{operation} failed: {type(exc).__name__}: {exc}")
        raise InfrastructureError("Storage is unavailable", operation=operation) from exc
