"""
User Domain Model

A customer account. Only the password hash is kept; hashing and
verification live outside the domain (see storefront.core.security).

Author: TM3
Date: 2025-10-22
"""
from typing import Optional

from pydantic import Field

from storefront.domain.base import AggregateRoot, new_id
from storefront.domain.exceptions import InvariantViolationError
from storefront.domain.value_objects import Email


class User(AggregateRoot):
    """
    User entity, persisted as its own aggregate

    Fields:
        id: User ID
        email: Unique e-mail address
        password_hash: Hash of the current password
        name: Display name (optional)
        is_active: Whether the account can still be changed
        version: Persisted version stamp
    """

    id: str = Field(default_factory=new_id, description="User ID")
    email: Email = Field(..., description="E-mail address")
    password_hash: str = Field(..., min_length=1, repr=False, description="Password hash")
    name: Optional[str] = Field(None, description="Display name")
    is_active: bool = Field(True, description="Whether the account is active")

    def change_email(self, email: Email) -> None:
        self._ensure_active()
        with self._guarded_mutation():
            self.email = email

    def change_password_hash(self, password_hash: str) -> None:
        self._ensure_active()
        with self._guarded_mutation():
            self.password_hash = password_hash

    def deactivate(self) -> None:
        with self._guarded_mutation():
            self.is_active = False

    def _ensure_active(self) -> None:
        if not self.is_active:
            raise InvariantViolationError(
                f"User {self.id} is inactive",
                code="user_inactive",
                details={"user_id": self.id}
            )
