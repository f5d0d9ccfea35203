"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes

Missing bearer token -> Unauthenticated (401)
Bad signature / malformed / expired token -> Forbidden (403)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings, get_app_settings
from app.core.errors import Forbidden, NotFound, Unauthenticated
from app.db.postgres import Database, fetch_one, get_db

logger = structlog.get_logger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; we raise our own errors instead of FastAPI's
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(username: str, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT carrying {username}. No exp claim when the configured lifetime is 0."""
    to_encode = {"username": username}
    if expires_delta is None and settings.jwt_expire_minutes > 0:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)
    if expires_delta is not None:
        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Optional[dict]:
    """Decode and verify JWT token. None if signature, format or expiry is bad."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """
    FastAPI dependency - the Auth Gate.

    Usage:
        @router.get("/protected")
        def route(identity: dict = Depends(get_current_identity)):
            return identity["username"]
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    payload = decode_token(credentials.credentials, settings)
    if not payload or not isinstance(payload.get("username"), str):
        logger.info("rejected bearer token")
        raise Forbidden()

    return {"username": payload["username"]}


def get_current_user(
    identity: dict = Depends(get_current_identity),
    db: Database = Depends(get_db),
) -> dict:
    """Dependency - resolve the token identity to its users row."""
    with db.session() as conn:
        user = fetch_one(
            conn,
            "SELECT user_id, username, is_registered, profile_category FROM users WHERE username = :username",
            {"username": identity["username"]}
        )

    if not user:
        raise NotFound("User not found")

    user["is_registered"] = bool(user["is_registered"])
    return user
