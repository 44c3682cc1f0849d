"""
Contains authentication-related helper functions, such as password hashing
and JWT creation/validation.

This module also provides the `get_current_session` dependency that protected
path operations use to identify the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from . import models
from .core.config import settings
from .exceptions import AccessDenied, AuthError
from .schemas import Role

logger = logging.getLogger(__name__)

# We use bcrypt as the hashing algorithm
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Missing credentials are reported by get_current_session, not by the scheme itself
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """The verified identity of the caller, passed to every protected handler."""
    id: int
    username: str
    role: Role
    expires_at: datetime

    @property
    def is_caretaker(self) -> bool:
        return self.role == Role.CARETAKER

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies a plain-text password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hashes a plain-text password using bcrypt."""
    return pwd_context.hash(password)


def create_access_token(user: models.User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a new JWT session token for an account.

    Args:
        user (models.User): The authenticated account.
        expires_delta (timedelta, optional): Overrides the configured lifetime.

    Returns:
        str: The encoded JWT token carrying id, username and role.
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> SessionContext:
    """
    Verifies a session token and turns its claims into a SessionContext.

    Raises:
        AuthError: If the token is expired, malformed, signed with another
            key, or missing one of its claims.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Token expired")
    except JWTError:
        raise AuthError()

    try:
        session = SessionContext(
            id=int(payload["id"]),
            username=str(payload["username"]),
            role=Role(payload["role"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise AuthError()

    if session.is_expired():
        raise AuthError("Token expired")
    return session


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionContext:
    """
    FastAPI dependency to secure endpoints and retrieve the caller's session.

    It decodes the JWT token from the "Authorization: Bearer" header and
    checks its expiry on every call.

    Raises:
        AuthError: If the header is missing or the token is not valid.
    """
    if credentials is None:
        raise AuthError("Missing token")
    return decode_access_token(credentials.credentials)


def require_caretaker(session: SessionContext = Depends(get_current_session)) -> SessionContext:
    """FastAPI dependency that only lets caretaker sessions through."""
    if not session.is_caretaker:
        logger.warning(f"User {session.id} with role '{session.role.value}' denied caretaker access.")
        raise AccessDenied()
    return session
