"""
Shared plumbing for the PostgreSQL repositories
"""
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from psycopg2 import errors as pg_errors

from storefront.core.database import transaction
from storefront.domain.exceptions import AlreadyExistsError
from storefront.repositories.errors import storage_errors


class PostgresRepository:
    """
    Base class for aggregate repositories

    Subclasses set:
        resource: Aggregate name used in errors and operation names
        SEARCHABLE_FIELDS: find_by_field() field name -> column name
    """

    resource: str = "aggregate"
    SEARCHABLE_FIELDS: Dict[str, str] = {}

    def _operation(self, name: str) -> str:
        return f"{self.resource.lower()}_repository.{name}"

    def _column_for(self, field: str) -> str:
        try:
            return self.SEARCHABLE_FIELDS[field]
        except KeyError:
            allowed = ", ".join(sorted(self.SEARCHABLE_FIELDS))
            raise ValueError(f"{self.resource} cannot be searched by {field!r} (allowed: {allowed})") from None

    @contextmanager
    def _cursor(self, operation: str, aggregate_id: Optional[str] = None) -> Iterator:
        """
        Cursor inside one transaction

        Unique violations become AlreadyExistsError, other driver errors
        become InfrastructureError.
        """
        with storage_errors(self._operation(operation)):
            try:
                with transaction() as conn:
                    cursor = conn.cursor()
                    try:
                        yield cursor
                    finally:
                        cursor.close()
            except pg_errors.UniqueViolation as exc:
                raise AlreadyExistsError(
                    f"{self.resource} {aggregate_id} conflicts with an existing record",
                    details={"id": aggregate_id}
                ) from exc
