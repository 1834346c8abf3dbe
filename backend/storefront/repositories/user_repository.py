"""
User Repository - Data Access Layer for Users

Author: TM3
Date: 2025-10-23
"""
import logging
from typing import Any, List, Optional

from storefront.domain.exceptions import ConcurrentModificationError
from storefront.domain.repositories import UserRepository
from storefront.domain.user import User
from storefront.repositories.base import PostgresRepository
from storefront.repositories.mappers import UserMapper


logger = logging.getLogger(__name__)


SELECT_USERS = """
    SELECT id, email, password_hash, name, is_active, version
    FROM users
"""


class PostgresUserRepository(PostgresRepository, UserRepository):
    """Repository for User aggregates"""

    resource = "User"
    SEARCHABLE_FIELDS = {
        'id': 'id',
        'email': 'email',
    }

    def create(self, user: User) -> User:
        with self._cursor("create", user.id) as cursor:
            cursor.execute("""
                INSERT INTO users (id, email, password_hash, name, is_active, version)
                VALUES (%(id)s, %(email)s, %(password_hash)s, %(name)s, %(is_active)s, %(version)s)
            """, UserMapper.to_row(user))
        return user

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._find_one("find_by_id", "id", user_id)

    def find_by_field(self, field: str, value: Any) -> Optional[User]:
        return self._find_one("find_by_field", self._column_for(field), value)

    def find_all(self) -> List[User]:
        with self._cursor("find_all") as cursor:
            cursor.execute(SELECT_USERS + " ORDER BY created_at, id")
            return [UserMapper.from_row(row) for row in cursor.fetchall()]

    def update(self, user: User) -> User:
        with self._cursor("update", user.id) as cursor:
            cursor.execute("""
                UPDATE users
                SET email = %(email)s,
                    password_hash = %(password_hash)s,
                    name = %(name)s,
                    is_active = %(is_active)s,
                    version = version + 1,
                    updated_at = NOW()
                WHERE id = %(id)s AND version = %(version)s
            """, UserMapper.to_row(user))

            if cursor.rowcount == 0:
                raise ConcurrentModificationError(
                    f"User {user.id} was modified or deleted since version {user.version}",
                    details={"user_id": user.id, "version": user.version}
                )

        user.version += 1
        return user

    def delete(self, user_id: str) -> bool:
        with self._cursor("delete") as cursor:
            cursor.execute("DELETE FROM users WHERE id = %s", (user_id,))
            return cursor.rowcount > 0

    def _find_one(self, operation: str, column: str, value: Any) -> Optional[User]:
        with self._cursor(operation) as cursor:
            cursor.execute(SELECT_USERS + f" WHERE {column} = %s LIMIT 1", (value,))
            row = cursor.fetchone()
            return UserMapper.from_row(row) if row else None
