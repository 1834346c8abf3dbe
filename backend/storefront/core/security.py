"""
Password hashing helpers
"""
from passlib.context import CryptContext

from storefront.domain.value_objects import Password


# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: Password) -> str:
    """Hash a validated password"""
    return pwd_context.hash(password.value)


def verify_password(raw_password: str, password_hash: str) -> bool:
    """Check a raw password against a stored hash"""
    return pwd_context.verify(raw_password, password_hash)
