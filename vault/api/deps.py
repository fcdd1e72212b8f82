from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vault.core.db import get_db
from vault.core.errors import Unauthorized
from vault.core.security import decode_access_token
from vault.models.user import User


bearer = HTTPBearer(auto_error=False)

async def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Decodes the bearer token from the Authorization header and returns the user
    it belongs to, with backup codes loaded.
    """
    if creds is None or not creds.credentials:
        raise Unauthorized("Not authorized, no token")
    sub = decode_access_token(creds.credentials)

    result = await db.execute(select(User).where(User.id == sub))
    user = result.scalar_one_or_none()
    if not user:
        raise Unauthorized("User not found")

    return user

