"""
User Service
Use cases for user accounts

Author: TM3
Date: 2025-10-22
"""
import logging

from storefront.core.security import hash_password, verify_password
from storefront.domain.exceptions import DuplicateMemberError, ValidationError
from storefront.domain.repositories import UserRepository
from storefront.domain.user import User
from storefront.domain.value_objects import Email, Password
from storefront.services.errors import NotFoundError, use_case
from storefront.services.schemas import RegisterUserCommand, UserView


logger = logging.getLogger(__name__)


class UserService:
    """Service for registration and account changes"""

    def __init__(self, users: UserRepository):
        self.users = users

    def register_user(self, command: RegisterUserCommand) -> UserView:
        with use_case("register_user", email=command.email):
            email = Email(value=command.email)
            password = Password(value=command.password)
            self._ensure_email_available(email)

            user = User(email=email, password_hash=hash_password(password), name=command.name)
            self.users.create(user)

        logger.info(f"User registered: {user.id}")
        return UserView.from_domain(user)

    def get_user(self, user_id: str) -> UserView:
        return UserView.from_domain(self._load(user_id, "get_user"))

    def change_email(self, user_id: str, new_email: str) -> UserView:
        operation = "change_email"
        with use_case(operation, user_id=user_id):
            user = self._load(user_id, operation)
            email = Email(value=new_email)
            if email != user.email:
                self._ensure_email_available(email)
                user.change_email(email)
                self.users.update(user)
        return UserView.from_domain(user)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> UserView:
        operation = "change_password"
        with use_case(operation, user_id=user_id):
            user = self._load(user_id, operation)
            if not verify_password(current_password, user.password_hash):
                raise ValidationError("Current password is incorrect", code="invalid_credentials")

            password = Password(value=new_password)
            user.change_password_hash(hash_password(password))
            self.users.update(user)

        logger.info(f"Password changed for user {user_id}")
        return UserView.from_domain(user)

    def deactivate_user(self, user_id: str) -> UserView:
        operation = "deactivate_user"
        with use_case(operation, user_id=user_id):
            user = self._load(user_id, operation)
            user.deactivate()
            self.users.update(user)

        logger.info(f"User deactivated: {user_id}")
        return UserView.from_domain(user)

    def _ensure_email_available(self, email: Email) -> None:
        if self.users.find_by_field("email", email.value) is not None:
            raise DuplicateMemberError(
                f"E-mail {email.value} is already registered",
                code="email_taken",
                details={"email": email.value}
            )

    def _load(self, user_id: str, operation: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id, operation)
        return user
