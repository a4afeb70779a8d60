from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from review_system.core.config import settings
from review_system.core.errors import AuthenticationFailure
from review_system.db.session import get_db
from review_system.models.user import User

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(raw_password: str) -> str:
    return pwd_context.hash(raw_password)


def verify_password(raw_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(raw_password, hashed_password)


def create_access_token(subject: str, claims: dict[str, Any] | None = None) -> str:
    """
    Issue a signed access token.

    `subject` is the username; `claims` are copied into the payload as-is.
    """
    to_encode: dict[str, Any] = dict(claims or {})
    expire_at = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    to_encode.update({"sub": subject, "exp": expire_at})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any] | None:
    """Return the payload of a valid token, or None."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the caller from an `Authorization: Bearer <token>` header.
    Sessions are not kept server side; every request carries its token.
    """
    if credentials is None:
        raise AuthenticationFailure("Missing bearer token")

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise AuthenticationFailure("Invalid or expired token")

    user = db.query(User).filter(User.username == payload["sub"]).one_or_none()
    if not user or not user.active:
        raise AuthenticationFailure("Invalid or inactive user")
    return user
