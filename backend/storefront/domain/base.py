"""
Domain Building Blocks

Base classes for value objects, entities and aggregate roots.

- ValueObject: immutable, compared by value, valid from construction
- Entity: mutable, compared by identity
- AggregateRoot: entity that owns a cluster of entities and guards its
  invariants on every mutation

Author: TM3
Date: 2025-10-21
"""
import copy
from contextlib import contextmanager
from typing import Any, Iterator, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from storefront.domain.exceptions import ValidationError


# Largest unit count a PostgreSQL INTEGER column can hold
MAX_QUANTITY = 2_147_483_647


def new_id() -> str:
    """Generate a new identifier for entities created without one"""
    return uuid4().hex


def _describe(exc: PydanticValidationError) -> str:
    """Flatten pydantic error details into one readable line"""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _validation_error(model: str, exc: PydanticValidationError) -> ValidationError:
    return ValidationError(
        f"Invalid {model}: {_describe(exc)}",
        details={"model": model, "errors": exc.errors(include_url=False, include_context=False, include_input=False)}
    )


class ValueObject(BaseModel):
    """
    Immutable value type

    Subclasses declare fields and validators; any failure surfaces as a
    domain ValidationError instead of pydantic's own error type.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise _validation_error(type(self).__name__, exc) from exc


class Entity(BaseModel):
    """Mutable domain object with a stable identifier"""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str = Field(default_factory=new_id)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise _validation_error(type(self).__name__, exc) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as exc:
            raise _validation_error(type(self).__name__, exc) from exc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return type(other) is type(self) and other.id == self.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


class AggregateRoot(Entity):
    """
    Consistency boundary for a cluster of entities and value objects

    Every state change goes through `_guarded_mutation()`: the change is
    applied, invariants are re-checked, and the previous state is restored
    if anything fails. Callers never observe a half-applied change.

    Fields:
        version: Optimistic concurrency stamp, advanced by repositories
    """

    version: int = Field(0, ge=0, description="Persisted version stamp")

    def check_invariants(self) -> None:
        """Raise a DomainError if the current state breaks a business rule"""

    def _capture_state(self) -> Tuple[dict, Any]:
        return copy.deepcopy(self.__dict__), copy.deepcopy(self.__pydantic_private__)

    def _restore_state(self, state: Tuple[dict, Any]) -> None:
        fields, private = state
        self.__dict__.update(fields)
        object.__setattr__(self, "__pydantic_private__", private)

    @contextmanager
    def _guarded_mutation(self) -> Iterator[None]:
        state = self._capture_state()
        try:
            yield
            self.check_invariants()
        except Exception:
            self._restore_state(state)
            raise
