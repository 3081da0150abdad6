"""Request schemas for auth endpoints."""

from pydantic import BaseModel, Field

from warden.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LEN, description="Email")


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
