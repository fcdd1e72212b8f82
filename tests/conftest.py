"""Shared fixtures: a throwaway SQLite database and the app wired to it."""

from __future__ import annotations

import os
import time

# settings are read at import time
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

import httpx  # noqa: E402
import pyotp  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker  # noqa: E402

from vault.core.db import Base, build_engine, get_db  # noqa: E402
from vault.core.security import hash_password  # noqa: E402
from vault.main import app  # noqa: E402
from vault.models.user import User  # noqa: E402

PASSWORD = "secret123"


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(db):
    """A registered account with the authenticator off."""
    db.add(User(name="Alice", email="alice@myvault.dev", hashed_password=hash_password(PASSWORD)))
    await db.commit()
    db.expunge_all()
    res = await db.execute(select(User).where(User.email == "alice@myvault.dev"))
    return res.scalar_one()


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as cx:
        yield cx
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth(client):
    """Register through the API and return (email, headers)."""
    email = "bob@myvault.dev"
    r = await client.post("/auth/register", json={"name": "Bob", "email": email, "password": PASSWORD})
    assert r.status_code == 201, r.text
    return email, {"Authorization": f"Bearer {r.json()['token']}"}


async def load_user(session_factory, email: str) -> User:
    """Read the account back in a fresh session."""
    async with session_factory() as session:
        res = await session.execute(select(User).where(User.email == email))
        return res.scalar_one()


def wrong_code(secret: str) -> str:
    """A 6-digit code outside the accepted window right now."""
    totp = pyotp.TOTP(secret)
    now = int(time.time())
    valid = {totp.at(now, off) for off in range(-2, 3)}
    for digit in "0123456789":
        candidate = digit * 6
        if candidate not in valid:
            return candidate
    raise AssertionError("unreachable")
