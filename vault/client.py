"""Async HTTP client for the authenticator and recovery endpoints.

The bearer token travels in a ``RequestContext`` passed to every call; the
client itself holds no login state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class RequestContext:
    base_url: str
    token: str | None = None

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def with_token(self, token: str) -> "RequestContext":
        return RequestContext(base_url=self.base_url, token=token)


class VaultClientError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class VaultClient:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None, timeout: float = 10.0):
        self._transport = transport
        self._timeout = timeout

    async def _request(self, ctx: RequestContext, method: str, path: str, json: dict | None = None) -> Any:
        async with httpx.AsyncClient(
            base_url=ctx.base_url, transport=self._transport, timeout=self._timeout
        ) as cx:
            r = await cx.request(method, path, json=json, headers=ctx.headers())
        if r.status_code >= 400:
            try:
                message = r.json().get("detail", r.text)
            except ValueError:
                message = r.text
            raise VaultClientError(r.status_code, str(message))
        return r.json()

    # --- accounts ---
    async def register(self, ctx: RequestContext, name: str, email: str, password: str) -> RequestContext:
        data = await self._request(ctx, "POST", "/auth/register",
                                   {"name": name, "email": email, "password": password})
        return ctx.with_token(data["token"])

    async def login(self, ctx: RequestContext, email: str, password: str,
                    otp: str | None = None, backup_code: str | None = None) -> RequestContext:
        body = {"email": email, "password": password}
        if otp:
            body["otp"] = otp
        if backup_code:
            body["backupCode"] = backup_code
        data = await self._request(ctx, "POST", "/auth/login", body)
        return ctx.with_token(data["token"])

    async def me(self, ctx: RequestContext) -> dict:
        return await self._request(ctx, "GET", "/auth/me")

    # --- profile ---
    async def profile(self, ctx: RequestContext) -> dict:
        return await self._request(ctx, "GET", "/user/profile")

    async def update_profile(self, ctx: RequestContext, name: str | None = None, bio: str | None = None) -> dict:
        body = {key: value for key, value in (("name", name), ("bio", bio)) if value is not None}
        return await self._request(ctx, "PUT", "/user/profile", body)

    async def change_password(self, ctx: RequestContext, old_password: str, new_password: str) -> str:
        data = await self._request(ctx, "PUT", "/user/change-password",
                                   {"oldPassword": old_password, "newPassword": new_password})
        return data["message"]

    # --- authenticator ---
    async def enable_authenticator(self, ctx: RequestContext) -> dict:
        return await self._request(ctx, "POST", "/auth/authenticator/enable")

    async def verify_authenticator(self, ctx: RequestContext, otp: str) -> list[str]:
        data = await self._request(ctx, "POST", "/auth/authenticator/verify", {"otp": otp})
        return data["backupCodes"]

    async def disable_authenticator(self, ctx: RequestContext, otp: str) -> str:
        data = await self._request(ctx, "POST", "/auth/authenticator/disable", {"otp": otp})
        return data["message"]

    async def backup_codes(self, ctx: RequestContext) -> dict:
        return await self._request(ctx, "GET", "/auth/authenticator/backup-codes")

    async def regenerate_backup_codes(self, ctx: RequestContext, otp: str) -> list[str]:
        data = await self._request(ctx, "POST", "/auth/authenticator/regenerate-backup-codes", {"otp": otp})
        return data["backupCodes"]

    # --- recovery ---
    async def check_authenticator(self, ctx: RequestContext, email: str) -> bool:
        data = await self._request(ctx, "GET", f"/auth/check-authenticator/{email}")
        return data["isAuthenticatorEnabled"]

    async def reset_password_with_authenticator(self, ctx: RequestContext, email: str,
                                                otp: str, new_password: str) -> str:
        data = await self._request(ctx, "POST", "/auth/reset-password-authenticator",
                                   {"email": email, "otp": otp, "newPassword": new_password})
        return data["message"]

    async def reset_password_with_backup_code(self, ctx: RequestContext, email: str,
                                              backup_code: str, new_password: str) -> str:
        data = await self._request(ctx, "POST", "/auth/reset-password-backup-code",
                                   {"email": email, "backupCode": backup_code, "newPassword": new_password})
        return data["message"]
