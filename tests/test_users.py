"""Tests for the /user profile and change-password routes."""

from __future__ import annotations

import pytest

from conftest import PASSWORD, load_user
from vault.core.config import settings
from vault.core.errors import Unauthorized, ValidationError
from vault.core.security import verify_password
from vault.services import accounts


async def test_profile_defaults(client, auth):
    email, headers = auth
    r = await client.get("/user/profile", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["email"] == email
    assert body["name"] == "Bob"
    assert body["bio"] == ""


async def test_update_profile(client, auth, session_factory):
    email, headers = auth
    r = await client.put("/user/profile", json={"name": "  Robert ", "bio": "keeps receipts"}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["name"] == "Robert"
    assert r.json()["bio"] == "keeps receipts"

    # fields left out stay as they were
    r = await client.put("/user/profile", json={"bio": "moved on"}, headers=headers)
    assert r.json()["name"] == "Robert"

    stored = await load_user(session_factory, email)
    assert stored.name == "Robert"
    assert stored.bio == "moved on"


async def test_update_profile_rejects_blank_name_and_long_bio(client, auth):
    _, headers = auth
    r = await client.put("/user/profile", json={"name": "   "}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Name cannot be empty"

    r = await client.put("/user/profile", json={"bio": "x" * 501}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Bio must be at most 500 characters"


async def test_user_routes_need_token(client):
    r = await client.get("/user/profile")
    assert r.status_code == 401
    r = await client.put("/user/change-password", json={"oldPassword": PASSWORD, "newPassword": "changed-pass"})
    assert r.status_code == 401


async def test_change_password_wrong_old_password(client, auth):
    _, headers = auth
    r = await client.put("/user/change-password",
                         json={"oldPassword": "not-my-password", "newPassword": "changed-pass"}, headers=headers)
    assert r.status_code == 401
    assert r.json()["detail"] == "Old password is incorrect"


async def test_change_password_short_new_password(client, auth, session_factory):
    email, headers = auth
    r = await client.put("/user/change-password",
                         json={"oldPassword": PASSWORD, "newPassword": "123"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "New password must be at least 6 characters"

    stored = await load_user(session_factory, email)
    assert verify_password(PASSWORD, stored.hashed_password)


async def test_change_password_then_login(client, auth):
    email, headers = auth
    r = await client.put("/user/change-password",
                         json={"oldPassword": PASSWORD, "newPassword": "changed-pass"}, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Password changed successfully"}

    r = await client.post("/auth/login", json={"email": email, "password": "changed-pass"})
    assert r.status_code == 200
    r = await client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 401


async def test_change_password_service(db, user):
    with pytest.raises(Unauthorized, match="Old password is incorrect"):
        await accounts.change_password(db, user, "nope-nope", "changed-pass")

    await accounts.change_password(db, user, PASSWORD, "changed-pass")
    assert verify_password("changed-pass", user.hashed_password)


def test_check_new_password_follows_setting(monkeypatch):
    accounts.check_new_password("secret123")
    monkeypatch.setattr(settings, "MIN_PASSWORD_LENGTH", 10)
    with pytest.raises(ValidationError, match="at least 10 characters"):
        accounts.check_new_password("secret123")
