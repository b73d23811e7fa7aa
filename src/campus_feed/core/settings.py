"""Application settings and configuration.

This module defines all configuration options for the campus feed store.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Campus Feed", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Durable storage backend
    storage_backend: Literal["memory", "file", "redis"] = Field(
        default="file",
        alias="CAMPUS_FEED_STORAGE_BACKEND",
    )
    storage_path: str = Field(
        default="./campus_feed.json",
        alias="CAMPUS_FEED_STORAGE_PATH",
    )

    # Redis configuration for the redis storage backend
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    redis_namespace: str = Field(default="campus_feed", alias="CAMPUS_FEED_REDIS_NAMESPACE")

    # Logical storage keys
    user_key: str = Field(default="user", alias="CAMPUS_FEED_USER_KEY")
    posts_key: str = Field(default="posts", alias="CAMPUS_FEED_POSTS_KEY")
    users_key: str = Field(default="users", alias="CAMPUS_FEED_USERS_KEY")

    # Signup rules
    min_username_length: int = Field(default=3, ge=1, alias="MIN_USERNAME_LENGTH")
    min_password_length: int = Field(default=6, ge=1, alias="MIN_PASSWORD_LENGTH")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def storage_keys(self) -> tuple[str, str, str]:
        """Return every key the store and the auth layer write to."""
        return (self.user_key, self.posts_key, self.users_key)


settings = Settings()
