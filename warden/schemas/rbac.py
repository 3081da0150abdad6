"""Read/write schemas for users, roles and permissions. Password hashes never appear here."""

from datetime import datetime

from pydantic import BaseModel, Field

from warden.core.security import EMAIL_MAX_LEN, USERNAME_MAX_LEN, USERNAME_MIN_LEN

NAME_MAX_LEN = 255
DESCRIPTION_MAX_LEN = 2_000


class PermissionRead(BaseModel):
    id: int
    permission_name: str
    description: str | None = None

    class Config:
        from_attributes = True


class RoleRead(BaseModel):
    """Role; `permissions` stays None unless explicitly loaded."""

    id: int
    role_name: str
    description: str | None = None
    permissions: list[PermissionRead] | None = None

    class Config:
        from_attributes = True


class UserRead(BaseModel):
    """User profile; `roles` stays None unless explicitly loaded."""

    id: int
    username: str
    email: str | None = None
    created_at: datetime | None = None
    roles: list[RoleRead] | None = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    """Profile changes. Fields left as None keep their stored value."""

    username: str | None = Field(
        default=None, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN
    )
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LEN)
    # Accepted for client compatibility and always discarded.
    password: str | None = Field(
        default=None, description="Ignored: passwords cannot be changed here"
    )


class RoleCreate(BaseModel):
    role_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)


class RoleUpdate(BaseModel):
    role_name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)


class PermissionCreate(BaseModel):
    permission_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)


class PermissionUpdate(BaseModel):
    permission_name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)
