"""Tests for the sliding-expiry session gate."""

import pytest

from ezbase.core.modules.session.models import SessionToken
from ezbase.core.store.memory import MemoryCollection
from ezbase.errors import StoreError


async def stored_expiry(core, token):
    record = await core.stores["auth"].collection("user_session").find_one("session_id", token)
    return record["active_period_expires_at"]


@pytest.mark.asyncio
class TestValidateSession:
    async def test_live_session_is_admitted_and_extended(self, core, clock):
        start = clock.now
        session = await core.services.session.create_session("a@x.com")
        assert session.active_period_expires_at == start + 60

        clock.advance(30)
        assert await core.services.session.validate_session(SessionToken(session.session_id))
        assert await stored_expiry(core, session.session_id) == start + 30 + 60

    async def test_active_session_never_expires_while_used(self, core, clock):
        session = await core.services.session.create_session("a@x.com")
        token = SessionToken(session.session_id)

        for _ in range(10):
            clock.advance(59)
            assert await core.services.session.validate_session(token)

    async def test_idle_session_expires(self, core, clock):
        session = await core.services.session.create_session("a@x.com")

        clock.advance(61)
        assert not await core.services.session.validate_session(SessionToken(session.session_id))

    async def test_expired_session_is_not_resurrected(self, core, clock):
        start = clock.now
        session = await core.services.session.create_session("a@x.com")

        clock.advance(61)
        assert not await core.services.session.validate_session(SessionToken(session.session_id))
        assert await stored_expiry(core, session.session_id) == start + 60

    async def test_expiry_bound_is_exclusive(self, core, clock):
        session = await core.services.session.create_session("a@x.com")

        clock.advance(60)
        assert not await core.services.session.validate_session(SessionToken(session.session_id))

    async def test_last_second_before_expiry_is_admitted(self, core, clock):
        session = await core.services.session.create_session("a@x.com")

        clock.advance(59)
        assert await core.services.session.validate_session(SessionToken(session.session_id))

    async def test_unknown_token_is_rejected(self, core, clock):
        assert not await core.services.session.validate_session(SessionToken("nope"))

    async def test_first_matching_record_is_authoritative(self, core, clock):
        start = clock.now
        sessions = core.stores["auth"].collection("user_session")
        await sessions.insert({"_id": "1", "session_id": "dup", "email": "a@x.com", "active_period_expires_at": start - 5})
        await sessions.insert({"_id": "2", "session_id": "dup", "email": "a@x.com", "active_period_expires_at": start + 5})

        assert not await core.services.session.validate_session(SessionToken("dup"))

    async def test_malformed_expiry_is_rejected(self, core, clock):
        sessions = core.stores["auth"].collection("user_session")
        await sessions.insert({"_id": "1", "session_id": "odd", "email": "a@x.com", "active_period_expires_at": "soon"})

        assert not await core.services.session.validate_session(SessionToken("odd"))

    async def test_lookup_failure_is_rejected(self, core, clock, monkeypatch):
        session = await core.services.session.create_session("a@x.com")

        async def failing_find(self, field, value):
            raise StoreError("boom")

        monkeypatch.setattr(MemoryCollection, "find", failing_find)
        assert not await core.services.session.validate_session(SessionToken(session.session_id))

    async def test_extension_failure_is_rejected(self, core, clock, monkeypatch):
        session = await core.services.session.create_session("a@x.com")

        async def failing_update(self, field, value, mutation):
            raise StoreError("boom")

        monkeypatch.setattr(MemoryCollection, "update_matching", failing_update)
        assert not await core.services.session.validate_session(SessionToken(session.session_id))


@pytest.mark.asyncio
class TestInvalidateSession:
    async def test_invalidated_session_is_rejected(self, core, clock):
        session = await core.services.session.create_session("a@x.com")
        token = SessionToken(session.session_id)

        assert await core.services.session.invalidate_session(token) == 1
        assert not await core.services.session.validate_session(token)

    async def test_invalidating_unknown_token_is_noop(self, core, clock):
        assert await core.services.session.invalidate_session(SessionToken("nope")) == 0


@pytest.mark.asyncio
async def test_extension_writes_only_expiry(core, clock):
    start = clock.now
    session = await core.services.session.create_session("a@x.com")
    clock.advance(10)

    await core.services.session.validate_session(SessionToken(session.session_id))

    record = await core.stores["auth"].collection("user_session").find_one("session_id", session.session_id)
    assert record["email"] == "a@x.com"
    assert record["created_at"] == start
    assert record["active_period_expires_at"] == start + 70
