"""Tests for signup, login and logout."""

import json

import pytest

from campus_feed.core.errors import AuthError, ConflictError, PersistenceError, ValidationError
from campus_feed.services.auth import AuthService
from campus_feed.services.store import EntityStore


@pytest.mark.asyncio
async def test_signup_registers_and_signs_in(auth: AuthService, store: EntityStore, storage) -> None:
    result = await auth.signup("  alice ", " alice@example.com ", "secret1")

    assert result.ok
    user = store.current_user
    assert user.username == "alice"
    assert user.email == "alice@example.com"
    assert user.reward_points == 0
    assert user.liked_posts == []

    catalog = json.loads(storage.data["users"])
    assert [u["username"] for u in catalog] == ["alice"]
    await store.flush()
    assert json.loads(storage.data["user"])["username"] == "alice"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("username", "email", "password", "message"),
    [
        ("", "a@example.com", "secret1", "All fields are required."),
        ("al", "a@example.com", "secret1", "Username must be at least 3 characters long."),
        ("alice", "not-an-email", "secret1", "Please enter a valid email."),
        ("alice", "a@example", "secret1", "Please enter a valid email."),
        ("alice", "a@example.com", "short", "Password must be at least 6 characters."),
    ],
)
async def test_signup_rejects_bad_input(
    auth: AuthService, store: EntityStore, storage, username, email, password, message
) -> None:
    result = await auth.signup(username, email, password)

    assert isinstance(result.error, ValidationError)
    assert result.error.message == message
    assert store.current_user is None
    assert "users" not in storage.data


@pytest.mark.asyncio
async def test_signup_rejects_duplicate_email(auth: AuthService, store: EntityStore) -> None:
    await auth.signup("alice", "alice@example.com", "secret1")
    store.set_user(None)

    result = await auth.signup("alicia", "alice@example.com", "secret2")

    assert isinstance(result.error, ConflictError)
    assert store.current_user is None
    assert [u.username for u in await auth.registered_users()] == ["alice"]


@pytest.mark.asyncio
async def test_signup_email_match_is_case_sensitive(auth: AuthService) -> None:
    await auth.signup("alice", "alice@example.com", "secret1")
    result = await auth.signup("alicia", "Alice@example.com", "secret2")
    assert result.ok


@pytest.mark.asyncio
async def test_signup_rejects_duplicate_username(auth: AuthService) -> None:
    await auth.signup("alice", "alice@example.com", "secret1")
    result = await auth.signup("alice", "other@example.com", "secret2")
    assert isinstance(result.error, ConflictError)


@pytest.mark.asyncio
async def test_signup_honours_configured_minimums(auth: AuthService, test_settings) -> None:
    test_settings.min_username_length = 5
    result = await auth.signup("alice", "alice@example.com", "secret1")
    assert result.ok
    result = await auth.signup("bob", "bob@example.com", "secret1")
    assert result.error.message == "Username must be at least 5 characters long."


@pytest.mark.asyncio
async def test_signup_reports_catalog_write_failure(
    auth: AuthService, store: EntityStore, storage
) -> None:
    storage.fail_writes = True
    result = await auth.signup("alice", "alice@example.com", "secret1")
    assert isinstance(result.error, PersistenceError)
    assert store.current_user is None


@pytest.mark.asyncio
async def test_signup_refuses_corrupt_catalog(auth: AuthService, storage) -> None:
    storage.data["users"] = "{not json"
    result = await auth.signup("alice", "alice@example.com", "secret1")
    assert isinstance(result.error, PersistenceError)
    assert storage.data["users"] == "{not json"


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["alice", "alice@example.com"])
async def test_login_restores_stored_user(
    auth: AuthService, store: EntityStore, storage, identifier
) -> None:
    await auth.signup("alice", "alice@example.com", "secret1")
    stored = (await auth.registered_users())[0]
    await auth.logout()

    result = await auth.login(identifier, "secret1")

    assert result.ok
    assert result.value == stored
    assert store.current_user == stored
    await store.flush()
    assert json.loads(storage.data["user"]) == stored.to_storage()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("identifier", "password"),
    [("alice", "wrong-pass"), ("nobody", "secret1"), ("alice@example.com", "SECRET1")],
)
async def test_login_rejects_bad_credentials(
    auth: AuthService, store: EntityStore, identifier, password
) -> None:
    await auth.signup("alice", "alice@example.com", "secret1")
    await auth.logout()

    result = await auth.login(identifier, password)

    assert isinstance(result.error, AuthError)
    assert result.error.message == "Invalid username/email or password."
    assert store.current_user is None


@pytest.mark.asyncio
async def test_login_requires_both_fields(auth: AuthService) -> None:
    result = await auth.login("", "")
    assert isinstance(result.error, ValidationError)


@pytest.mark.asyncio
async def test_logout_clears_user(auth: AuthService, store: EntityStore, storage) -> None:
    await auth.signup("alice", "alice@example.com", "secret1")
    assert (await auth.logout()).ok
    assert store.current_user is None
    assert "user" not in storage.data
    assert "users" in storage.data


@pytest.mark.asyncio
async def test_reset_storage(auth: AuthService, store: EntityStore, storage, make_post) -> None:
    await auth.signup("alice", "alice@example.com", "secret1")
    store.add_post(make_post())

    assert (await auth.reset_storage()).ok

    assert storage.data == {}
    assert store.current_user is None
    assert store.posts == ()


@pytest.mark.asyncio
async def test_registered_users_skips_malformed_entries(auth: AuthService, storage) -> None:
    storage.data["users"] = json.dumps(
        [{"username": "alice", "email": "a@example.com", "password": "secret1"}, {"bogus": 1}]
    )
    assert [u.username for u in await auth.registered_users()] == ["alice"]
