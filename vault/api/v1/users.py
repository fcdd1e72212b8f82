from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vault.core.db import get_db
from vault.models.user import User
from vault.schemas.auth import ChangePasswordIn, MessageOut, ProfileOut, ProfileUpdateIn
from vault.services import accounts
from vault.api.deps import get_current_user

router = APIRouter(prefix="/user", tags=["user"])

@router.get("/profile", response_model=ProfileOut)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user

@router.put("/profile", response_model=ProfileOut)
async def update_profile(
    body: ProfileUpdateIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await accounts.update_profile(db, current_user, body.name, body.bio)

@router.put("/change-password", response_model=MessageOut)
async def change_password(
    body: ChangePasswordIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await accounts.change_password(db, current_user, body.old_password, body.new_password)
    return MessageOut(message="Password changed successfully")
