import asyncio
from datetime import datetime, timedelta, timezone

from drivesync.domain import share_uri
from drivesync.services.sessions import DatabaseSessionProvider

from conftest import FIXED_NOW


def test_active_session_for_creator(store):
    asyncio.run(store.register_dropped_file("a.pdf", "invoice", creator="user-1"))
    provider = DatabaseSessionProvider(store, clock=lambda: FIXED_NOW)

    session = asyncio.run(provider.get_active_session_for_creator(share_uri("a.pdf")))
    assert session.session_id == "session-1"
    assert session.access_token == "token-1"


def test_expired_session_is_ignored(store):
    asyncio.run(store.register_dropped_file("b.pdf", "invoice", creator="user-2"))
    provider = DatabaseSessionProvider(store, clock=lambda: FIXED_NOW)

    assert asyncio.run(provider.get_active_session_for_creator(share_uri("b.pdf"))) is None
    assert asyncio.run(provider.get_session("session-expired")) is None


def test_unknown_creator(store):
    asyncio.run(store.register_dropped_file("c.pdf", "invoice"))
    provider = DatabaseSessionProvider(store, clock=lambda: FIXED_NOW)
    assert asyncio.run(provider.get_active_session_for_creator(share_uri("c.pdf"))) is None
    assert asyncio.run(provider.get_active_session_for_creator(share_uri("unknown.pdf"))) is None


def test_naive_expiry_is_taken_as_utc(store):
    asyncio.run(store.add_session("session-naive", "user-3", "token-3", datetime(2024, 3, 5, 15, 0)))
    provider = DatabaseSessionProvider(store, clock=lambda: FIXED_NOW)
    assert asyncio.run(provider.get_session("session-naive")) is not None

    later = DatabaseSessionProvider(store, clock=lambda: FIXED_NOW + timedelta(hours=2))
    assert asyncio.run(later.get_session("session-naive")) is None


def test_access_token_of_session(store):
    provider = DatabaseSessionProvider(store, clock=lambda: FIXED_NOW)
    assert asyncio.run(provider.get_access_token("session-1")) == "token-1"
    assert asyncio.run(provider.get_access_token("session-expired")) is None
    assert asyncio.run(provider.get_access_token("unknown")) is None
