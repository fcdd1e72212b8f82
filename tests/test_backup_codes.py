"""Tests for backup code generation and one-time consumption."""

from __future__ import annotations

import re

import pytest

from conftest import load_user
from vault.core.errors import InvalidCode
from vault.services import backup_codes

HEX8 = re.compile(r"^[0-9A-F]{8}$")


def test_generate_codes_gives_ten_distinct_hex_codes():
    codes = backup_codes.generate_codes()
    assert len(codes) == 10
    values = [bc.code for bc in codes]
    assert all(HEX8.match(v) for v in values)
    assert len(set(values)) == 10
    assert [bc.position for bc in codes] == list(range(10))
    assert not any(bc.used for bc in codes)


def test_generate_codes_custom_count():
    assert len(backup_codes.generate_codes(3)) == 3


async def test_replace_codes_swaps_whole_set(db, user):
    first = backup_codes.replace_codes(user)
    await db.commit()
    second = backup_codes.replace_codes(user)
    await db.commit()

    assert len(second) == 10
    assert set(first).isdisjoint(second)
    assert backup_codes.list_unused(user) == second


async def test_consume_marks_code_used_once(db, user, session_factory):
    codes = backup_codes.replace_codes(user)
    await db.commit()

    await backup_codes.consume(db, user, codes[0])
    await db.commit()

    stored = await load_user(session_factory, user.email)
    spent = [bc for bc in stored.backup_codes if bc.used]
    assert [bc.code for bc in spent] == [codes[0]]
    assert spent[0].used_at is not None

    with pytest.raises(InvalidCode, match="Invalid or already used backup code"):
        await backup_codes.consume(db, user, codes[0])


async def test_consume_is_case_insensitive(db, user):
    codes = backup_codes.replace_codes(user)
    await db.commit()

    await backup_codes.consume(db, user, f"  {codes[1].lower()} ")
    assert backup_codes.count_used(user) == 1
    assert codes[1] not in backup_codes.list_unused(user)


@pytest.mark.parametrize("submitted", ["", "ZZZZZZZZ", "1234", "not a code at all", "ÄÖÜ12345", None])
async def test_consume_rejects_malformed_and_unknown_alike(db, user, submitted):
    backup_codes.replace_codes(user)
    await db.commit()

    with pytest.raises(InvalidCode) as exc:
        await backup_codes.consume(db, user, submitted)
    assert exc.value.message == backup_codes.INVALID_BACKUP_CODE
    assert backup_codes.count_used(user) == 0


async def test_consume_loses_race_against_concurrent_request(db, user, session_factory):
    codes = backup_codes.replace_codes(user)
    await db.commit()

    # a second request loaded the same account before the first one spent the code
    async with session_factory() as other:
        stale = await load_user(session_factory, user.email)
        other.add(stale)

        await backup_codes.consume(db, user, codes[2])
        await db.commit()

        with pytest.raises(InvalidCode):
            await backup_codes.consume(other, stale, codes[2])

    stored = await load_user(session_factory, user.email)
    assert sum(1 for bc in stored.backup_codes if bc.used) == 1


async def test_list_unused_and_count_used(db, user):
    codes = backup_codes.replace_codes(user)
    await db.commit()
    for code in codes[:3]:
        await backup_codes.consume(db, user, code)
    await db.commit()

    assert backup_codes.count_used(user) == 3
    assert backup_codes.list_unused(user) == codes[3:]
