import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext

from jose import jwt, JWTError
from vault.core.config import settings
from vault.core.errors import Unauthorized

# --- 2FA helpers ---
import base64
from io import BytesIO
import pyotp
import qrcode


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

OTP_RE = re.compile(r"^[0-9]{6}$")

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str | None) -> bool:
    # a missing or unparseable stored hash never matches
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False

def create_access_token(user_id: str, role: str, ttl: Optional[timedelta] = None) -> str:
    """Sign a bearer token for ``user_id``; ``ttl`` defaults to ACCESS_TOKEN_EXPIRE_MINUTES."""
    issued = datetime.now(tz=timezone.utc)
    lifetime = ttl if ttl is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": user_id, "role": role, "iat": issued, "exp": issued + lifetime}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def decode_access_token(token: str) -> str:
    """Return the ``sub`` claim of a valid token, raise Unauthorized otherwise."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub:
        raise Unauthorized("Invalid token payload")
    return sub

# --- 2FA functions ---

@dataclass(frozen=True)
class EnrollmentSecret:
    secret: str
    uri: str

def generate_secret(account_label: str, issuer_name: str = settings.APP_NAME) -> EnrollmentSecret:
    # 32 chars base32 = 160 bits
    secret = pyotp.random_base32(length=32)
    return EnrollmentSecret(secret=secret, uri=totp_uri_from_secret(secret, account_label, issuer_name))

def totp_uri_from_secret(secret: str, account_label: str, issuer: str = settings.APP_NAME) -> str:
    totp = pyotp.TOTP(secret)
    return totp.provisioning_uri(name=account_label, issuer_name=issuer)

def verify_totp(
        otp: str,
        secret: str | None,
        window: int = settings.TOTP_VALID_WINDOW,
        for_time: datetime | int | None = None,
        ) -> bool:
    """
    Check a 6-digit code against the counters ``t - window .. t + window``
    (30 s steps). Malformed codes or secrets give False instead of raising.
    """
    if not secret or not isinstance(otp, str) or not OTP_RE.match(otp):
        return False
    try:
        return pyotp.TOTP(secret).verify(otp, for_time=for_time, valid_window=window)
    except ValueError:
        # binascii.Error on a secret that is not base32
        return False

def qr_data_uri_from_text(text: str) -> str:
    img = qrcode.make(text)
    buf = BytesIO()
    img.save(buf, "PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")
