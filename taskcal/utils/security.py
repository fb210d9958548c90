from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from pydantic import ValidationError as PydanticValidationError

from taskcal.config import settings
from taskcal.errors import TokenExpired, TokenMalformed, TokenSignatureInvalid
from taskcal.schemas.user import TokenData


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt directly."""
    password_bytes = password.encode("utf-8")[:72]  # bcrypt limit
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    hashed_bytes = hashed_password.encode("utf-8") if isinstance(hashed_password, str) else hashed_password
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return get_password_hash("not-a-real-password")


def burn_password_check(plain_password: str) -> None:
    """Spend the same bcrypt effort as a real check when the user does not exist."""
    verify_password(plain_password, _dummy_hash())


def create_access_token(user, expires_delta: timedelta | None = None) -> str:
    """Issue a signed token carrying the user's id, username and role."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    role = getattr(user.role, "value", user.role)
    to_encode = {
        "sub": str(user.id),
        "id": user.id,
        "username": user.username,
        "role": role,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> TokenData:
    """
    Decode and verify a token.

    Raises TokenMalformed when the token cannot be parsed or lacks the
    identity claims, TokenSignatureInvalid when the signature does not match
    the server secret, and TokenExpired once ``exp`` has passed.
    """
    try:
        jwt.get_unverified_claims(token)
    except JWTError:
        raise TokenMalformed()

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise TokenSignatureInvalid()

    try:
        return TokenData(id=payload.get("id"), username=payload.get("username"), role=payload.get("role"))
    except PydanticValidationError:
        raise TokenMalformed("Token is missing identity claims")
