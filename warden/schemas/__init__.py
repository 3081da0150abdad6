"""Pydantic request/response schemas."""

from warden.schemas.auth import LoginRequest, RegisterRequest
from warden.schemas.envelope import ApiResponse
from warden.schemas.health import HealthResponse
from warden.schemas.rbac import (
    PermissionCreate,
    PermissionRead,
    PermissionUpdate,
    RoleCreate,
    RoleRead,
    RoleUpdate,
    UserRead,
    UserUpdate,
)

__all__ = [
    "ApiResponse",
    "HealthResponse",
    "LoginRequest",
    "PermissionCreate",
    "PermissionRead",
    "PermissionUpdate",
    "RegisterRequest",
    "RoleCreate",
    "RoleRead",
    "RoleUpdate",
    "UserRead",
    "UserUpdate",
]
