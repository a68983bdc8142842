import asyncio
import re
from datetime import datetime, timedelta, timezone

from app.core import security
from app.core.config import settings
from app.core.security import generate_reset_code
from app.db.database import AsyncSessionLocal
from app.repositories.reset_code_repo import ResetCodeRepository
from app.services.password_reset_service import PasswordResetService


def test_generated_codes_are_six_digits():
    for _ in range(200):
        assert re.fullmatch(r"\d{6}", generate_reset_code())


def test_generated_code_bounds(monkeypatch):
    monkeypatch.setattr(security.secrets, "randbelow", lambda n: 0)
    assert generate_reset_code() == "100000"

    monkeypatch.setattr(security.secrets, "randbelow", lambda n: n - 1)
    assert generate_reset_code() == "999999"


def test_generator_draws_from_900000_values(monkeypatch):
    seen = []

    def fake_randbelow(n):
        seen.append(n)
        return 0

    monkeypatch.setattr(security.secrets, "randbelow", fake_randbelow)
    generate_reset_code()

    assert seen == [900000]


async def _claim_twice():
    now = datetime.now(timezone.utc)
    async with AsyncSessionLocal() as session:
        repo = ResetCodeRepository(session)
        reset = await repo.create_reset_code("race@x.com", "123456", now, 15)

        first = await repo.claim_code(reset.id, now)
        await session.commit()
        second = await repo.claim_code(reset.id, now)
        await session.commit()

        still_valid = await repo.find_valid_code("race@x.com", "123456", now)
    return first, second, still_valid


def test_claiming_a_code_succeeds_only_once(client):
    first, second, still_valid = asyncio.run(_claim_twice())

    assert first is True
    assert second is False
    assert still_valid is None


async def _newest_match():
    now = datetime.now(timezone.utc)
    async with AsyncSessionLocal() as session:
        repo = ResetCodeRepository(session)
        await repo.create_reset_code("dup@x.com", "654321", now - timedelta(minutes=2), 15)
        newer = await repo.create_reset_code("dup@x.com", "654321", now - timedelta(minutes=1), 15)
        found = await repo.find_valid_code("dup@x.com", "654321", now)
    return newer.id, found.id


def test_find_valid_code_prefers_newest_row(client):
    newer_id, found_id = asyncio.run(_newest_match())

    assert found_id == newer_id


def test_explicit_lifetime_is_not_replaced_by_default():
    service = PasswordResetService(db=None, email_client=None, expire_minutes=0, reissue_policy="")

    assert service.expire_minutes == 0
    assert service.reissue_policy == ""
    assert PasswordResetService(db=None, email_client=None).expire_minutes == settings.RESET_CODE_EXPIRE_MINUTES
