"""
Auth service — signup, login and profile updates against the users table.

Passwords are hashed with bcrypt (random salt per hash, cost 10). bcrypt
only reads the first 72 bytes of a password, so longer ones are rejected
at signup instead of being silently truncated.
"""
from __future__ import annotations

import logging
from datetime import datetime

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User
from domain.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from middleware.auth import issue_access_token

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"must be at most {MAX_PASSWORD_BYTES} bytes", field="password")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(raw, password_hash.encode("utf-8"))


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def signup(db: AsyncSession, email: str, password: str) -> User:
    """
    Register a new user.

    Raises:
        ConflictError if the email is already registered
    """
    email = normalize_email(email)
    if await get_user(db, email) is not None:
        raise ConflictError("Email already registered")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("Email already registered") from e

    logger.info(f"User registered: id={user.id}")
    return user


async def login(db: AsyncSession, email: str, password: str) -> dict:
    """
    Check credentials and issue an access token.

    Unknown email and wrong password produce the same error.
    """
    user = await get_user(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    return {
        "email": user.email,
        "accessToken": issue_access_token(email=user.email),
        "tokenType": "Bearer",
        "profilePic": user.profile_pic,
    }


async def update_profile(
    db: AsyncSession,
    email: str,
    password: str | None = None,
    profile_pic: str | None = None,
) -> User:
    """Change password and/or profile picture for an existing user."""
    user = await get_user(db, email)
    if user is None:
        raise NotFoundError("User", normalize_email(email))

    if password:
        user.password_hash = hash_password(password)
    if profile_pic is not None:
        user.profile_pic = profile_pic
    user.updated_at = datetime.utcnow()

    await db.commit()
    logger.info(f"Profile updated: id={user.id}")
    return user
