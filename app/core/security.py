"""
Password hashing (bcrypt via passlib).

The cost factor comes from BCRYPT_SALT_ROUNDS.
"""

from typing import Optional

from passlib.context import CryptContext

from app.core.config import get_settings

settings = get_settings()

# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_salt_rounds,
)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify password against hash.
    Accounts created through Google sign-in have no hash and never match.
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
