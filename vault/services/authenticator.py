"""Authenticator (TOTP) lifecycle for one account.

States are read from ``User.authenticator_state``::

    disabled --enable--> pending --verify--> enabled --disable--> disabled
                 ^  |                          |  ^
                 +--+ (new secret)             +--+ regenerate / view codes

Each operation is a single read-modify-write committed once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from vault.core.config import settings
from vault.core.errors import AlreadyEnabled, InvalidCode, NotEnabled
from vault.core.security import generate_secret, qr_data_uri_from_text, verify_totp
from vault.models.user import AuthenticatorState, User
from vault.services import backup_codes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Enrollment:
    secret: str
    otpauth_url: str
    qr_code: str


@dataclass(frozen=True)
class BackupCodesView:
    codes: list[str]
    total: int
    used: int


def _require_enabled(user: User) -> None:
    if user.authenticator_state is not AuthenticatorState.enabled:
        raise NotEnabled()


def _check_otp(user: User, otp: str) -> None:
    if not verify_totp(otp, user.authenticator_secret, window=settings.TOTP_VALID_WINDOW):
        logger.warning("Invalid authenticator code for user %s", user.id)
        raise InvalidCode()


async def enable(db: AsyncSession, user: User) -> Enrollment:
    """Issue a new secret and keep it pending until the first valid code."""
    if user.authenticator_state is AuthenticatorState.enabled:
        raise AlreadyEnabled()

    issued = generate_secret(user.email, settings.APP_NAME)
    # replaces any earlier pending secret; only the latest QR will validate
    user.authenticator_secret = issued.secret
    user.is_authenticator_enabled = False
    await db.commit()
    logger.info("Authenticator enrollment started for user %s", user.id)

    return Enrollment(
        secret=issued.secret,
        otpauth_url=issued.uri,
        qr_code=qr_data_uri_from_text(issued.uri),
    )


async def verify(db: AsyncSession, user: User, otp: str) -> list[str]:
    """Confirm enrollment. Returns the plaintext backup codes, shown only here."""
    state = user.authenticator_state
    if state is AuthenticatorState.disabled:
        raise NotEnabled("Authenticator secret not found. Enable authenticator first.")
    if state is AuthenticatorState.enabled:
        raise AlreadyEnabled()

    _check_otp(user, otp)

    user.is_authenticator_enabled = True
    codes = backup_codes.replace_codes(user)
    await db.commit()
    logger.info("Authenticator enabled for user %s", user.id)
    return codes


async def disable(db: AsyncSession, user: User, otp: str) -> None:
    _require_enabled(user)
    _check_otp(user, otp)

    # secret and codes go in the same commit
    user.authenticator_secret = None
    user.is_authenticator_enabled = False
    user.backup_codes = []
    await db.commit()
    logger.info("Authenticator disabled for user %s", user.id)


async def regenerate_backup_codes(db: AsyncSession, user: User, otp: str) -> list[str]:
    _require_enabled(user)
    _check_otp(user, otp)

    codes = backup_codes.replace_codes(user)
    await db.commit()
    logger.info("Backup codes regenerated for user %s", user.id)
    return codes


def view_backup_codes(user: User) -> BackupCodesView:
    # no OTP here, unlike regenerate/disable
    _require_enabled(user)
    return BackupCodesView(
        codes=backup_codes.list_unused(user),
        total=len(user.backup_codes),
        used=backup_codes.count_used(user),
    )
