"""
Authentication Routes

POST /auth/register - Register new user (creates the matching profile)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
PUT /auth/users/{user_id} - Update an account (self, or ADMIN for anyone)
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from campus_recruit.db.database import get_db_session, fetch_one
from campus_recruit.db.tables import company_profiles, student_profiles, users, utcnow
from campus_recruit.core.auth import hash_password, verify_password, token_for_user, get_current_user
from campus_recruit.core.errors import Conflict, NotFound, Unauthenticated
from campus_recruit.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, AccountUpdate, UserRole
)
from campus_recruit.services.authorization import Ownership, Principal, authorize, enforce

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

_USER_COLUMNS = (users.c.id, users.c.name, users.c.email, users.c.role, users.c.created_at)


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account and return a token.

    STUDENT and COMPANY accounts get an empty profile straight away.
    """
    with get_db_session() as db:
        if fetch_one(db, select(users.c.id).where(users.c.email == request.email)):
            raise Conflict("Email already in use")

        try:
            result = db.execute(
                insert(users).values(
                    name=request.name,
                    email=request.email,
                    password_hash=hash_password(request.password),
                    role=request.role.value,
                    created_at=utcnow(),
                )
            )
        except IntegrityError:
            raise Conflict("Email already in use")
        user_id = result.inserted_primary_key[0]

        if request.role == UserRole.STUDENT:
            db.execute(insert(student_profiles).values(user_id=user_id, skills=[], created_at=utcnow()))
        elif request.role == UserRole.COMPANY:
            db.execute(insert(company_profiles).values(
                user_id=user_id, name=request.company_name or request.name, created_at=utcnow()
            ))

        user = fetch_one(db, select(*_USER_COLUMNS).where(users.c.id == user_id))

    logger.info("Registered %s user %s", request.role.value, user_id)
    return TokenResponse(token=token_for_user(user), user=UserResponse(**user))


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = fetch_one(db, select(*_USER_COLUMNS, users.c.password_hash).where(users.c.email == request.email))

    if not user or not verify_password(request.password, user["password_hash"]):
        raise Unauthenticated("Invalid credentials")

    user.pop("password_hash")
    return TokenResponse(token=token_for_user(user), user=UserResponse(**user))


@router.get("/me", response_model=UserResponse)
async def get_me(user: Principal = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        row = fetch_one(db, select(*_USER_COLUMNS).where(users.c.id == user.id))
    return UserResponse(**row)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_account(user_id: int, data: AccountUpdate, user: Principal = Depends(get_current_user)):
    """
    Update name / email / password.

    Users may only update themselves; ADMIN may target any account.
    """
    enforce(authorize(
        user, {UserRole.STUDENT, UserRole.COMPANY, UserRole.ADMIN},
        Ownership(resource_owner_id=user_id, caller_profile_id=user.id, admin_override=True),
    ))

    values = {}
    if data.name is not None:
        values["name"] = data.name
    if data.email is not None:
        values["email"] = data.email
    if data.password is not None:
        values["password_hash"] = hash_password(data.password)

    with get_db_session() as db:
        if not fetch_one(db, select(users.c.id).where(users.c.id == user_id)):
            raise NotFound("User not found")

        if "email" in values:
            taken = fetch_one(
                db, select(users.c.id).where(users.c.email == values["email"], users.c.id != user_id)
            )
            if taken:
                raise Conflict("Email already in use")

        if values:
            try:
                db.execute(update(users).where(users.c.id == user_id).values(**values))
            except IntegrityError:
                raise Conflict("Email already in use")

        row = fetch_one(db, select(*_USER_COLUMNS).where(users.c.id == user_id))

    if user.id != user_id:
        logger.info("Admin %s updated account %s", user.id, user_id)
    return UserResponse(**row)
