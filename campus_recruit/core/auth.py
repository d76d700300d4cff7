"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies that resolve the bearer token to a Principal
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select

from campus_recruit.core.config import get_settings
from campus_recruit.core.errors import Unauthenticated
from campus_recruit.db.database import get_db_session, fetch_one
from campus_recruit.db.tables import users
from campus_recruit.schemas.schemas import UserRole
from campus_recruit.services.authorization import Principal, require_role

settings = get_settings()

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)

# Bearer token extractor (missing header is handled below so it maps to 401)
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def token_for_user(user: dict) -> str:
    """Issue a token carrying {sub, role, name} for a users row."""
    return create_access_token(
        data={"sub": str(user["id"]), "role": user["role"], "name": user["name"]}
    )


def resolve_principal(token: str) -> Principal:
    """Turn a bearer token into a Principal, re-reading the user from the database."""
    payload = decode_token(token)
    if not payload:
        raise Unauthenticated()

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated()

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise Unauthenticated()

    with get_db_session() as db:
        user = fetch_one(
            db,
            select(users.c.id, users.c.name, users.c.email, users.c.role).where(users.c.id == user_id),
        )

    if not user:
        raise Unauthenticated()

    # Role comes from the database, not from the token claims
    return Principal(
        id=user["id"], role=UserRole(user["role"]), name=user["name"], email=user["email"]
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: Principal = Depends(get_current_user)):
            return user
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Not authenticated")
    return resolve_principal(credentials.credentials)


async def get_current_student(user: Principal = Depends(get_current_user)) -> Principal:
    """Dependency - Require STUDENT role."""
    require_role(user, UserRole.STUDENT)
    return user


async def get_current_company(user: Principal = Depends(get_current_user)) -> Principal:
    """Dependency - Require COMPANY role."""
    require_role(user, UserRole.COMPANY)
    return user


async def get_current_admin(user: Principal = Depends(get_current_user)) -> Principal:
    """Dependency - Require ADMIN role."""
    require_role(user, UserRole.ADMIN)
    return user
