"""Account records: lookup, signup, profile edits and password changes."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vault.core.config import settings
from vault.core.errors import Unauthorized, ValidationError
from vault.core.security import hash_password, verify_password
from vault.models.user import User

logger = logging.getLogger(__name__)

BIO_MAX_LENGTH = 500


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email.strip().lower()))
    return res.scalar_one_or_none()


def check_new_password(password: str | None, label: str = "Password") -> None:
    if not password or len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(f"{label} must be at least {settings.MIN_PASSWORD_LENGTH} characters")


async def register_user(db: AsyncSession, name: str, email: str, password: str) -> User:
    check_new_password(password)
    if await get_user_by_email(db, email):
        raise ValidationError("User already exists")

    user = User(
        name=name.strip(),
        email=email.strip().lower(),
        hashed_password=hash_password(password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User registered: %s", user.id)
    return user


async def update_profile(db: AsyncSession, user: User, name: str | None, bio: str | None) -> User:
    """Only fields that were sent change; an empty bio clears it."""
    if name is not None:
        if not name.strip():
            raise ValidationError("Name cannot be empty")
        user.name = name.strip()
    if bio is not None:
        if len(bio) > BIO_MAX_LENGTH:
            raise ValidationError(f"Bio must be at most {BIO_MAX_LENGTH} characters")
        user.bio = bio
    await db.commit()
    logger.info("Profile updated for user %s", user.id)
    return user


async def change_password(db: AsyncSession, user: User, old_password: str, new_password: str) -> None:
    check_new_password(new_password, label="New password")
    if not verify_password(old_password, user.hashed_password):
        logger.warning("Wrong current password on change for user %s", user.id)
        raise Unauthorized("Old password is incorrect")

    user.hashed_password = hash_password(new_password)
    await db.commit()
    logger.info("Password changed for user %s", user.id)
