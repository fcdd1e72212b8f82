from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vault.core.db import get_db
from vault.schemas.auth import (
    AuthenticatorStatusOut, MessageOut, ResetWithAuthenticatorIn, ResetWithBackupCodeIn,
)
from vault.services import recovery

router = APIRouter(prefix="/auth", tags=["password"])

@router.get("/check-authenticator/{email}", response_model=AuthenticatorStatusOut)
async def check_authenticator_enabled(email: str, db: AsyncSession = Depends(get_db)):
    enabled = await recovery.check_enabled(db, email)
    return AuthenticatorStatusOut(is_authenticator_enabled=enabled)

@router.post("/reset-password-authenticator", response_model=MessageOut)
async def reset_password_with_authenticator(
    payload: ResetWithAuthenticatorIn,
    db: AsyncSession = Depends(get_db),
):
    await recovery.reset_with_authenticator(db, payload.email, payload.otp, payload.new_password)
    return MessageOut(
        message="Password reset successfully using Authenticator. You can now login with your new password."
    )

@router.post("/reset-password-backup-code", response_model=MessageOut)
async def reset_password_with_backup_code(
    payload: ResetWithBackupCodeIn,
    db: AsyncSession = Depends(get_db),
):
    await recovery.reset_with_backup_code(db, payload.email, payload.backup_code, payload.new_password)
    return MessageOut(
        message="Password reset successfully using backup code. You can now login with your new password."
    )
