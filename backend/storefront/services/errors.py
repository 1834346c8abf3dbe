"""
Application Errors

Use cases wrap the domain errors they recognize into ApplicationError,
adding the operation name, the identifiers involved and the correlation id.
The original error stays available as __cause__. Errors that are not
recognized propagate unchanged.

Author: TM3
Date: 2025-10-22
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from storefront.core.context import get_correlation_id
from storefront.domain.exceptions import DomainError, ErrorKind


logger = logging.getLogger(__name__)


# Kinds a use case knows how to report to its caller
TRANSLATED_KINDS = frozenset({
    ErrorKind.VALIDATION,
    ErrorKind.INVARIANT,
    ErrorKind.DUPLICATE,
    ErrorKind.NOT_FOUND,
    ErrorKind.CONFLICT,
})


class ApplicationError(Exception):
    """
    Failure of one named use case

    Attributes:
        kind: ErrorKind inherited from the domain error (or set directly)
        code: Machine-readable reason
        message: Human-readable description
        operation: Use case name (e.g. "place_order")
        context: Identifiers the use case was working with
        details: Extra data from the domain error
        correlation_id: Id of the request being served, if any
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        code: str,
        operation: str,
        context: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code
        self.operation = operation
        self.context = context or {}
        self.details = details or {}
        self.correlation_id = correlation_id or get_correlation_id()

    @classmethod
    def from_domain(
        cls,
        error: DomainError,
        operation: str,
        context: Optional[Dict[str, Any]] = None
    ) -> "ApplicationError":
        return cls(
            error.message,
            kind=error.kind,
            code=error.code,
            operation=operation,
            context=context,
            details=error.details
        )

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "operation": self.operation,
            "context": self.context,
            "details": self.details,
            "correlation_id": self.correlation_id,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(operation={self.operation!r}, code={self.code!r})"


class NotFoundError(ApplicationError):
    """A repository lookup found no aggregate"""

    def __init__(self, resource: str, resource_id: str, operation: str):
        key = f"{resource.lower()}_id"
        super().__init__(
            f"{resource} {resource_id} not found",
            kind=ErrorKind.NOT_FOUND,
            code=f"{resource.lower()}_not_found",
            operation=operation,
            context={key: resource_id}
        )


@contextmanager
def use_case(operation: str, **context: Any) -> Iterator[None]:
    """
    Translate domain errors raised inside one use case

    Usage:
        with use_case("confirm_order", order_id=order_id):
            order = self._load(order_id)
            order.confirm()
            self.orders.update(order)
    """
    try:
        yield
    except DomainError as exc:
        if exc.kind not in TRANSLATED_KINDS:
            raise
        logger.info(f"{operation} rejected ({exc.kind.value}/{exc.code}): {exc.message} context={context}")
        raise ApplicationError.from_domain(exc, operation, context) from exc
