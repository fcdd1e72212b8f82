import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vault.core.db import get_db
from vault.core.config import settings
from vault.core.errors import InvalidCode, Unauthorized
from vault.core.security import verify_password, create_access_token, verify_totp
from vault.models.user import AuthenticatorState, User
from vault.schemas.auth import (
    RegisterIn, LoginIn, TokenOut, UserOut, MessageOut,
    OtpIn, EnrollmentOut, BackupCodesOut, BackupCodesViewOut,
)
from vault.services import accounts, authenticator, backup_codes
from vault.services.accounts import get_user_by_email
from vault.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

def _token_out(user: User) -> TokenOut:
    token = create_access_token(user.id, user.role.value)
    return TokenOut(token=token, user=UserOut.model_validate(user))

@router.post("/register", response_model=TokenOut, status_code=201)
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_db)):
    user = await accounts.register_user(db, payload.name, payload.email, payload.password)
    return _token_out(user)

@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_db)):
    user = await get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise Unauthorized("Invalid credentials")

    # with the authenticator on, a TOTP code or one backup code is also needed
    if user.authenticator_state is AuthenticatorState.enabled:
        if payload.otp:
            if not verify_totp(payload.otp, user.authenticator_secret, window=settings.TOTP_VALID_WINDOW):
                raise Unauthorized("Invalid two-factor code")
        elif payload.backup_code:
            try:
                await backup_codes.consume(db, user, payload.backup_code)
            except InvalidCode:
                raise Unauthorized("Invalid two-factor code")
            await db.commit()
        else:
            raise Unauthorized("Two-factor code required")

    logger.info("Login successful for user %s", user.id)
    return _token_out(user)

@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return current_user

# ---------- AUTHENTICATOR ----------
@router.post("/authenticator/enable", response_model=EnrollmentOut)
async def enable_authenticator(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    enrollment = await authenticator.enable(db, current_user)
    return EnrollmentOut(
        qr_code=enrollment.qr_code,
        secret=enrollment.secret,
        manual_entry_key=enrollment.secret,
        otpauth_url=enrollment.otpauth_url,
    )

@router.post("/authenticator/verify", response_model=BackupCodesOut)
async def verify_authenticator(
    body: OtpIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    codes = await authenticator.verify(db, current_user, body.otp)
    return BackupCodesOut(message="Authenticator enabled successfully", backup_codes=codes)

@router.post("/authenticator/disable", response_model=MessageOut)
async def disable_authenticator(
    body: OtpIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await authenticator.disable(db, current_user, body.otp)
    return MessageOut(message="Authenticator disabled successfully")

@router.get("/authenticator/backup-codes", response_model=BackupCodesViewOut)
async def get_backup_codes(current_user: User = Depends(get_current_user)):
    view = authenticator.view_backup_codes(current_user)
    return BackupCodesViewOut(backup_codes=view.codes, total=view.total, used=view.used)

@router.post("/authenticator/regenerate-backup-codes", response_model=BackupCodesOut)
async def regenerate_backup_codes(
    body: OtpIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    codes = await authenticator.regenerate_backup_codes(db, current_user, body.otp)
    return BackupCodesOut(message="Backup codes regenerated successfully", backup_codes=codes)
