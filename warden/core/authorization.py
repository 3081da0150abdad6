"""
Permission evaluation and the request gate.

OPERATION_PERMISSIONS is the single source of truth for which operation
needs which permission. authorize() is the one dispatcher every gated call
goes through; it reads state but never writes authorization data.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.orm import Session

from warden.core.errors import AccessError, ErrorKind, NotFoundError
from warden.schemas.rbac import UserRead
from warden.services import sessions as session_store
from warden.services import users as user_store

logger = logging.getLogger(__name__)

# Operation name (the endpoint function name) -> required permission.
OPERATION_PERMISSIONS: dict[str, str] = {
    "list_users": "user:view",
    "get_user": "user:view",
    "update_user": "user:edit",
    "delete_user": "user:delete",
    "assign_role_to_user": "user:assign_role",
    "remove_role_from_user": "user:remove_role",
    "list_roles": "role:view",
    "get_role": "role:view",
    "create_role": "role:create",
    "update_role": "role:edit",
    "delete_role": "role:delete",
    "add_permission_to_role": "role:assign_permission",
    "remove_permission_from_role": "role:remove_permission",
    "list_permissions": "permission:view",
    "get_permission": "permission:view",
    "create_permission": "permission:create",
    "update_permission": "permission:edit",
    "delete_permission": "permission:delete",
}


def required_permission(operation: str) -> str | None:
    """Permission an operation needs, or None if it is ungated."""
    return OPERATION_PERMISSIONS.get(operation)


def all_permission_names() -> list[str]:
    """Every distinct permission the gate can ask for, sorted."""
    return sorted(set(OPERATION_PERMISSIONS.values()))


def has_permission(user: Any, required: str) -> bool:
    """
    True if any of the user's roles carries a permission named exactly `required`.

    `user` must already have roles and each role's permissions loaded; this
    function does no lookups. Roles whose permissions are None are skipped.
    """
    roles: Iterable[Any] | None = getattr(user, "roles", None)
    if not roles:
        return False
    for role in roles:
        permissions = getattr(role, "permissions", None)
        if not permissions:
            continue
        for permission in permissions:
            if permission.permission_name == required:
                return True
    return False


def authorize(db: Session, session_id: str | None, operation: str) -> UserRead | None:
    """
    Gate one call. Returns the freshly loaded user, or None for ungated operations.

    Raises AccessError(NOT_AUTHENTICATED) for anonymous or expired sessions
    and AccessError(PERMISSION_DENIED) when no role grants the permission.
    """
    permission = required_permission(operation)
    if permission is None:
        return None

    user_id = session_store.resolve_session(db, session_id)
    if user_id is None:
        logger.info("Gate denied (anonymous): operation=%s", operation)
        raise AccessError(ErrorKind.NOT_AUTHENTICATED)

    try:
        user = user_store.get_user_with_roles(db, user_id)
    except NotFoundError:
        # Session outlived its user; treat as anonymous.
        logger.info("Gate denied (user gone): operation=%s, user_id=%s", operation, user_id)
        raise AccessError(ErrorKind.NOT_AUTHENTICATED) from None

    if not has_permission(user, permission):
        logger.warning(
            "Gate denied: operation=%s, user_id=%s, required=%s",
            operation,
            user_id,
            permission,
        )
        raise AccessError(ErrorKind.PERMISSION_DENIED)
    return user
