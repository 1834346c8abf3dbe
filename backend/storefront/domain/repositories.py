"""
Repository Contracts

Persistence-agnostic interfaces consumed by the services layer. Concrete
implementations live in storefront.repositories.

Author: TM3
Date: 2025-10-22
"""
from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

from storefront.domain.base import AggregateRoot
from storefront.domain.order import Order
from storefront.domain.product import Product
from storefront.domain.user import User


T = TypeVar("T", bound=AggregateRoot)


class Repository(ABC, Generic[T]):
    """
    Load and store whole aggregates

    Implementations must:
        - raise AlreadyExistsError from create() when the id is taken
        - compare versions in update() and raise ConcurrentModificationError
          when the stored version is not the aggregate's version; on success
          both advance by one
        - write an aggregate and its members as one unit
    """

    @abstractmethod
    def create(self, aggregate: T) -> T:
        """Store a new aggregate"""

    @abstractmethod
    def find_by_id(self, aggregate_id: str) -> Optional[T]:
        """Return the aggregate or None if not found"""

    @abstractmethod
    def find_by_field(self, field: str, value: Any) -> Optional[T]:
        """Return the first aggregate whose `field` equals `value`, or None"""

    @abstractmethod
    def find_all(self) -> List[T]:
        """Return every stored aggregate"""

    @abstractmethod
    def update(self, aggregate: T) -> T:
        """Store changes to an existing aggregate"""

    @abstractmethod
    def delete(self, aggregate_id: str) -> bool:
        """Remove an aggregate; returns False if it did not exist"""


class ProductRepository(Repository[Product], ABC):
    pass


class OrderRepository(Repository[Order], ABC):
    pass


class UserRepository(Repository[User], ABC):
    pass
