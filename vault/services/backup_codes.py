"""Single-use recovery codes issued alongside the authenticator."""

from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from vault.core.config import settings
from vault.core.errors import InvalidCode
from vault.models.backup_code import BackupCode
from vault.models.user import User

logger = logging.getLogger(__name__)

CODE_BYTES = 4  # 8 hex chars
CODE_RE = re.compile(r"^[0-9A-F]{8}$")
INVALID_BACKUP_CODE = "Invalid or already used backup code"


def _new_code() -> str:
    return secrets.token_hex(CODE_BYTES).upper()


def generate_codes(count: int = settings.BACKUP_CODE_COUNT) -> list[BackupCode]:
    """Fresh unused codes, distinct within the batch."""
    codes: list[str] = []
    while len(codes) < count:
        code = _new_code()
        if code not in codes:
            codes.append(code)
    return [BackupCode(code=c, position=i, used=False) for i, c in enumerate(codes)]


def replace_codes(user: User) -> list[str]:
    """Swap the whole set for a new batch and return the plaintext codes."""
    user.backup_codes = generate_codes()
    return [bc.code for bc in user.backup_codes]


def list_unused(user: User) -> list[str]:
    return [bc.code for bc in user.backup_codes if not bc.used]


def count_used(user: User) -> int:
    return sum(1 for bc in user.backup_codes if bc.used)


def normalize(submitted: str | None) -> str:
    return (submitted or "").strip().upper()


async def consume(db: AsyncSession, user: User, submitted: str | None) -> None:
    """
    Mark the matching unused code as used.

    The UPDATE only matches while ``used`` is still false, so two requests
    racing on the same code cannot both spend it. Malformed, unknown and
    already used codes all raise the same InvalidCode. The caller commits.
    """
    wanted = normalize(submitted)
    entry = None
    if CODE_RE.match(wanted):
        entry = next(
            (bc for bc in user.backup_codes if not bc.used and secrets.compare_digest(bc.code, wanted)),
            None,
        )
    if entry is None:
        logger.warning("Rejected backup code for user %s", user.id)
        raise InvalidCode(INVALID_BACKUP_CODE)

    now = datetime.now(timezone.utc).replace(tzinfo=None)
    res = await db.execute(
        update(BackupCode)
        .where(BackupCode.id == entry.id, BackupCode.used == False)  # noqa: E712
        .values(used=True, used_at=now)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        logger.warning("Backup code for user %s was spent by a concurrent request", user.id)
        raise InvalidCode(INVALID_BACKUP_CODE)

    # row already written, keep the loaded object in step without re-flushing it
    set_committed_value(entry, "used", True)
    set_committed_value(entry, "used_at", now)
    logger.info("Backup code consumed for user %s", user.id)
