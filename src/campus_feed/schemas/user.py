"""User-related Pydantic schemas."""

import re

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .common import Record

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class User(Record):
    """Identity, profile and reward state of a registered user."""

    username: str
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    image: str | None = None
    course: str | None = None
    year: str | None = None
    department: str | None = None
    reward_points: int | float = 0
    liked_posts: list[str] = Field(default_factory=list)

    def has_liked(self, post_id: str) -> bool:
        """Return True if ``post_id`` is in the user's liked posts."""
        return post_id in self.liked_posts


class SignupRequest(BaseModel):
    """Credentials submitted when registering a new user.

    Minimum lengths can be overridden through the validation context
    (``min_username_length`` / ``min_password_length``).
    """

    username: str = Field(..., description="Unique login name")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="Plaintext password")

    @field_validator("username", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, v: object) -> object:
        """Trim surrounding whitespace from login identifiers."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str, info: ValidationInfo) -> str:
        """Require a non-empty username of the minimum length."""
        if not v:
            raise ValueError("All fields are required.")
        minimum = (info.context or {}).get("min_username_length", 3)
        if len(v) < minimum:
            raise ValueError(f"Username must be at least {minimum} characters long.")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Require a basic ``local@domain.tld`` shape."""
        if not v:
            raise ValueError("All fields are required.")
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email.")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str, info: ValidationInfo) -> str:
        """Require a non-empty password of the minimum length."""
        if not v:
            raise ValueError("All fields are required.")
        minimum = (info.context or {}).get("min_password_length", 6)
        if len(v) < minimum:
            raise ValueError(f"Password must be at least {minimum} characters.")
        return v


class LoginRequest(BaseModel):
    """Credentials submitted at login."""

    username_or_email: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1, description="Plaintext password")
