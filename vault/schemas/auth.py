from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from enum import Enum

OTP_PATTERN = r"^[0-9]{6}$"

class CamelModel(BaseModel):
    # camelCase on the wire, snake_case accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Role(str, Enum):
    user = "user"
    admin = "admin"

class RegisterIn(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)   # length checked against MIN_PASSWORD_LENGTH

class LoginIn(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    otp: str | None = None           # required when the authenticator is enabled
    backup_code: str | None = None   # or one unused backup code instead

class UserOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    email: EmailStr
    role: Role
    is_authenticator_enabled: bool

class TokenOut(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserOut

class MessageOut(CamelModel):
    message: str

# --- 2FA ---
class OtpIn(CamelModel):
    otp: str = Field(..., pattern=OTP_PATTERN)

class EnrollmentOut(CamelModel):
    message: str = "QR code generated successfully"
    qr_code: str                     # data:image/png;base64,...
    secret: str
    manual_entry_key: str
    otpauth_url: str

class BackupCodesOut(CamelModel):
    message: str
    backup_codes: list[str]

class BackupCodesViewOut(CamelModel):
    backup_codes: list[str]
    total: int
    used: int

class AuthenticatorStatusOut(CamelModel):
    is_authenticator_enabled: bool

# --- recovery ---
class ResetWithAuthenticatorIn(CamelModel):
    email: EmailStr
    otp: str = Field(..., pattern=OTP_PATTERN)
    new_password: str = Field(..., min_length=1)

class ResetWithBackupCodeIn(CamelModel):
    email: EmailStr
    backup_code: str = Field(..., min_length=1)  # format checked on consume, same error as unknown
    new_password: str = Field(..., min_length=1)

# --- profile ---
class ProfileOut(UserOut):
    bio: str

class ProfileUpdateIn(CamelModel):
    name: str | None = None
    bio: str | None = None

class ChangePasswordIn(CamelModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
