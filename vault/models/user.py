import datetime as dt
import enum
import uuid
from typing import TYPE_CHECKING
from sqlalchemy import String, Enum, Boolean, DateTime, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from vault.core.db import Base

if TYPE_CHECKING:
    from vault.models.backup_code import BackupCode


class RoleEnum(str, enum.Enum):
    user = "user"
    admin = "admin"


class AuthenticatorState(str, enum.Enum):
    disabled = "disabled"
    pending = "pending"      # secret issued, waiting for the first valid code
    enabled = "enabled"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "is_authenticator_enabled = 0 OR authenticator_secret IS NOT NULL",
            name="ck_users_enabled_has_secret",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255))
    bio: Mapped[str] = mapped_column(String(500), default="", server_default="")
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    role: Mapped[RoleEnum] = mapped_column(Enum(RoleEnum), default=RoleEnum.user)
    hashed_password: Mapped[str] = mapped_column(String(255))

    # email-OTP password reset (handled outside this service, cleared on 2FA recovery)
    reset_otp: Mapped[str | None] = mapped_column(String(6), nullable=True)
    reset_otp_expiry: Mapped[dt.datetime | None] = mapped_column(DateTime, nullable=True)

    # 2FA
    authenticator_secret: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_authenticator_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    backup_codes: Mapped[list["BackupCode"]] = relationship(
        "BackupCode",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="BackupCode.position",
        lazy="selectin",
    )

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def authenticator_state(self) -> AuthenticatorState:
        if self.is_authenticator_enabled and self.authenticator_secret:
            return AuthenticatorState.enabled
        if self.authenticator_secret:
            return AuthenticatorState.pending
        return AuthenticatorState.disabled
