"""Signup, login and logout against the persisted users catalog."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError as PydanticValidationError

from campus_feed.core.errors import (
    AuthError,
    ConflictError,
    PersistenceError,
    StoreError,
    ValidationError,
)
from campus_feed.core.settings import Settings
from campus_feed.schemas.result import StoreResult
from campus_feed.schemas.user import LoginRequest, SignupRequest, User
from campus_feed.services.store import EntityStore
from campus_feed.storage.base import StorageGateway

__all__ = ["AuthService"]

logger = logging.getLogger(__name__)


def _first_error_message(exc: PydanticValidationError) -> str:
    """Return the first validation message without pydantic's prefix."""
    errors = exc.errors()
    if not errors:
        return "Invalid input."
    return str(errors[0]["msg"]).removeprefix("Value error, ")


class AuthService:
    """Registers users and moves them in and out of the entity store.

    The registered-users catalog lives in storage only; it is read on every
    signup and login and written synchronously on signup.
    """

    def __init__(
        self,
        store: EntityStore,
        storage: StorageGateway | None = None,
        config: Settings | None = None,
    ) -> None:
        self.store = store
        self.storage = storage or store.storage
        self.settings = config or store.settings

    async def registered_users(self) -> list[User]:
        """Return the users catalog.

        Raises:
            PersistenceError: If storage fails or the catalog is not a JSON list.
        """
        raw = await self.storage.get(self.settings.users_key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Users catalog is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise PersistenceError("Users catalog is not a list")

        users: list[User] = []
        for entry in data:
            try:
                users.append(User.model_validate(entry))
            except PydanticValidationError:
                logger.error("Skipping malformed users catalog entry")
        return users

    async def signup(self, username: str, email: str, password: str) -> StoreResult:
        """Register a new user and make them the resident user.

        Username and email are trimmed before every check. The new user
        starts with zero reward points and no liked posts.
        """
        try:
            request = SignupRequest.model_validate(
                {"username": username, "email": email, "password": password},
                context={
                    "min_username_length": self.settings.min_username_length,
                    "min_password_length": self.settings.min_password_length,
                },
            )
        except PydanticValidationError as exc:
            return self._reject(ValidationError(_first_error_message(exc)))

        try:
            users = await self.registered_users()
        except PersistenceError as exc:
            return self._reject(exc)

        if any(u.username == request.username or u.email == request.email for u in users):
            return self._reject(ConflictError("Username or Email already exists."))

        new_user = User(
            username=request.username,
            email=request.email,
            password=request.password,
            reward_points=0,
            liked_posts=[],
        )
        users.append(new_user)
        try:
            await self.storage.set(
                self.settings.users_key,
                json.dumps([user.to_storage() for user in users]),
            )
        except PersistenceError as exc:
            return self._reject(exc)

        self.store.set_user(new_user)
        logger.info("Registered user %s", new_user.username)
        return StoreResult.success(new_user)

    async def login(self, username_or_email: str, password: str) -> StoreResult:
        """Sign in the catalog user matching (username or email) and password."""
        try:
            request = LoginRequest(username_or_email=username_or_email, password=password)
        except PydanticValidationError:
            return self._reject(ValidationError("Please enter your username/email and password."))

        try:
            users = await self.registered_users()
        except PersistenceError as exc:
            return self._reject(exc)

        found = next(
            (
                u
                for u in users
                if request.username_or_email in (u.username, u.email)
                and u.password == request.password
            ),
            None,
        )
        if found is None:
            return self._reject(AuthError("Invalid username/email or password."))

        self.store.set_user(found)
        logger.info("User %s signed in", found.username)
        return StoreResult.success(found)

    async def logout(self) -> StoreResult:
        """Sign out the resident user and remove the persisted user record."""
        self.store.set_user(None)
        await self.store.flush()
        return StoreResult.success()

    async def reset_storage(self) -> StoreResult:
        """Erase every persisted key and clear the resident state."""
        await self.store.flush()
        try:
            for key in self.settings.storage_keys:
                await self.storage.remove(key)
        except PersistenceError as exc:
            return self._reject(exc)
        self.store.clear()
        logger.info("Cleared local storage")
        return StoreResult.success()

    @staticmethod
    def _reject(error: StoreError) -> StoreResult:
        logger.warning("%s: %s", type(error).__name__, error.message)
        return StoreResult.failure(error)
