"""Password reset gated by the authenticator instead of an emailed OTP."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from vault.core.config import settings
from vault.core.errors import InvalidCode, NotEnabled, NotFound
from vault.core.security import hash_password, verify_totp
from vault.models.user import AuthenticatorState, User
from vault.services import backup_codes
from vault.services.accounts import check_new_password, get_user_by_email

logger = logging.getLogger(__name__)

UNKNOWN_EMAIL = "No user found with this email"


async def _load_enabled_user(db: AsyncSession, email: str, unknown: Exception) -> User:
    user = await get_user_by_email(db, email)
    if not user:
        raise unknown
    if user.authenticator_state is not AuthenticatorState.enabled:
        raise NotEnabled("Authenticator is not enabled for this user")
    return user


def _unknown_email_error(fallback: Exception) -> Exception:
    return fallback if settings.HIDE_UNKNOWN_EMAILS else NotFound(UNKNOWN_EMAIL)


def _set_password(user: User, new_password: str) -> None:
    user.hashed_password = hash_password(new_password)
    # any pending email reset is void once the password changed
    user.reset_otp = None
    user.reset_otp_expiry = None


async def check_enabled(db: AsyncSession, email: str) -> bool:
    """Tell the client whether the authenticator recovery path applies."""
    user = await get_user_by_email(db, email)
    if not user:
        if settings.HIDE_UNKNOWN_EMAILS:
            return False
        raise NotFound(UNKNOWN_EMAIL)
    return user.authenticator_state is AuthenticatorState.enabled


async def reset_with_authenticator(db: AsyncSession, email: str, otp: str, new_password: str) -> None:
    check_new_password(new_password)
    user = await _load_enabled_user(db, email, _unknown_email_error(InvalidCode()))

    if not verify_totp(otp, user.authenticator_secret, window=settings.TOTP_VALID_WINDOW):
        logger.warning("Invalid authenticator code on password reset for user %s", user.id)
        raise InvalidCode()

    _set_password(user, new_password)
    await db.commit()
    logger.info("Password reset with authenticator for user %s", user.id)


async def reset_with_backup_code(db: AsyncSession, email: str, backup_code: str, new_password: str) -> None:
    check_new_password(new_password)
    user = await _load_enabled_user(
        db, email, _unknown_email_error(InvalidCode(backup_codes.INVALID_BACKUP_CODE))
    )

    await backup_codes.consume(db, user, backup_code)

    _set_password(user, new_password)
    await db.commit()
    logger.info("Password reset with backup code for user %s", user.id)
