# vault/models/backup_code.py
from __future__ import annotations
import datetime as dt
from typing import TYPE_CHECKING
from sqlalchemy import ForeignKey, String, DateTime, Boolean, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from vault.core.db import Base

if TYPE_CHECKING:
    from vault.models.user import User


class BackupCode(Base):
    __tablename__ = "backup_codes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # kept in clear: unused codes are shown again on GET /auth/authenticator/backup-codes
    code: Mapped[str] = mapped_column(String(8), nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    used_at: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="backup_codes")
