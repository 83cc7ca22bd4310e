"""In-memory backend unit tests."""

import pytest

from redefynn_gate import ApplicationStats, AuthBackendError, BackendError, Profile
from redefynn_gate.backend import InMemoryAuthClient, InMemoryPersistenceClient


async def test_sign_up_and_sign_in() -> None:
    auth = InMemoryAuthClient()
    signed_up = await auth.sign_up("jane@example.com", "secret123")
    assert signed_up.session is not None
    resp = await auth.sign_in_with_password("jane@example.com", "secret123")
    assert resp.user is not None and resp.user.email == "jane@example.com"
    assert await auth.get_session() == resp.session


async def test_sign_up_duplicate() -> None:
    auth = InMemoryAuthClient()
    await auth.sign_up("jane@example.com", "secret123")
    with pytest.raises(AuthBackendError, match="already registered"):
        await auth.sign_up("jane@example.com", "secret123")


async def test_sign_in_wrong_password() -> None:
    auth = InMemoryAuthClient()
    await auth.sign_up("jane@example.com", "secret123")
    with pytest.raises(AuthBackendError, match="Invalid login credentials"):
        await auth.sign_in_with_password("jane@example.com", "wrongpass1")


async def test_unconfirmed_account_cannot_sign_in() -> None:
    auth = InMemoryAuthClient(auto_confirm=False)
    resp = await auth.sign_up("jane@example.com", "secret123")
    assert resp.session is None
    with pytest.raises(AuthBackendError, match="Email not confirmed"):
        await auth.sign_in_with_password("jane@example.com", "secret123")
    auth.confirm_email("jane@example.com")
    await auth.sign_in_with_password("jane@example.com", "secret123")


async def test_update_user_with_reset_token() -> None:
    auth = InMemoryAuthClient()
    await auth.sign_up("jane@example.com", "secret123")
    token = auth.issue_reset_token("jane@example.com")
    await auth.update_user(token, "newsecret1")
    await auth.sign_in_with_password("jane@example.com", "newsecret1")
    with pytest.raises(AuthBackendError):
        await auth.update_user("bogus", "newsecret1")


async def test_sign_out_clears_session() -> None:
    auth = InMemoryAuthClient()
    await auth.sign_up("jane@example.com", "secret123")
    await auth.sign_out()
    assert await auth.get_session() is None


async def test_insert_and_list_newest_first() -> None:
    db = InMemoryPersistenceClient()
    first = await db.insert_application({"user_id": "u1", "name": "A", "age": 30})
    second = await db.insert_application({"user_id": "u1", "name": "B", "age": 31})
    await db.insert_application({"user_id": "u2", "name": "C", "age": 32})
    mine = await db.list_applications("u1")
    assert [r.id for r in mine] == [second.id, first.id]
    assert len(await db.list_applications()) == 3
    assert first.created_at and first.updated_at


async def test_insert_requires_user_id() -> None:
    db = InMemoryPersistenceClient()
    with pytest.raises(BackendError, match="not-null"):
        await db.insert_application({"name": "A"})


async def test_profiles_and_stats() -> None:
    db = InMemoryPersistenceClient()
    db.add_profile(Profile(id="p1", user_id="u1", is_admin=True))
    db.add_stats(ApplicationStats(application_count=1, month_year="2026-01"))
    db.add_stats(ApplicationStats(application_count=2, month_year="2026-02"))
    profile = await db.get_profile("u1")
    assert profile is not None and profile.is_admin
    assert await db.get_profile("u2") is None
    assert [s.month_year for s in await db.list_application_stats()] == ["2026-02", "2026-01"]
