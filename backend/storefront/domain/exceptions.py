"""
Domain Errors

Every error raised by the domain layer carries an ErrorKind tag. Upper layers
translate errors by looking at the tag, never at the concrete class.

Author: TM3
Date: 2025-10-21
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Closed set of error kinds shared by every layer"""

    VALIDATION = "validation"
    INVARIANT = "invariant"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INFRASTRUCTURE = "infrastructure"


class DomainError(Exception):
    """
    Base class for business rule failures

    Attributes:
        kind: ErrorKind tag used for translation
        code: Machine-readable reason (e.g. "weight_limit_exceeded")
        message: Human-readable description
        details: Extra data about the failure (identifiers, limits, values)
    """

    kind: ErrorKind = ErrorKind.INVARIANT
    default_code: str = "domain_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(DomainError):
    """A value failed its format or range check"""

    kind = ErrorKind.VALIDATION
    default_code = "validation_failed"


class InvariantViolationError(DomainError):
    """An operation would leave an aggregate in an invalid state"""

    kind = ErrorKind.INVARIANT
    default_code = "invariant_violated"


class DuplicateMemberError(DomainError):
    """An aggregate already holds a member with the same identity"""

    kind = ErrorKind.DUPLICATE
    default_code = "duplicate_member"


class MissingMemberError(DomainError):
    """A referenced member (stock, line item, product) does not exist"""

    kind = ErrorKind.NOT_FOUND
    default_code = "missing_member"


class AlreadyExistsError(DomainError):
    """A repository already stores an aggregate with the same id"""

    kind = ErrorKind.CONFLICT
    default_code = "already_exists"


class ConcurrentModificationError(DomainError):
    """The stored version advanced since the aggregate was loaded"""

    kind = ErrorKind.CONFLICT
    default_code = "concurrent_modification"
