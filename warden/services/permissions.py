"""Permission store: CRUD over capability strings."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warden.core.errors import ConflictError, ErrorKind, NotFoundError
from warden.models import Permission, RolePermission
from warden.schemas.rbac import PermissionCreate, PermissionUpdate

logger = logging.getLogger(__name__)


def list_permissions(db: Session) -> list[Permission]:
    return db.query(Permission).order_by(Permission.id).all()


def get_permission(db: Session, permission_id: int) -> Permission:
    permission = db.get(Permission, permission_id)
    if permission is None:
        raise NotFoundError(ErrorKind.PERMISSION_NOT_FOUND)
    return permission


def find_permission_by_name(db: Session, permission_name: str) -> Permission | None:
    return db.query(Permission).filter(Permission.permission_name == permission_name).first()


def create_permission(db: Session, body: PermissionCreate) -> Permission:
    if find_permission_by_name(db, body.permission_name) is not None:
        raise ConflictError(ErrorKind.DUPLICATE_PERMISSION_NAME)
    permission = Permission(permission_name=body.permission_name, description=body.description)
    db.add(permission)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(ErrorKind.DUPLICATE_PERMISSION_NAME) from e
    db.refresh(permission)
    logger.info(
        "Permission created: id=%s, name=%s", permission.id, permission.permission_name
    )
    return permission


def update_permission(db: Session, permission_id: int, body: PermissionUpdate) -> Permission:
    """Apply the non-null fields of body to the permission."""
    permission = get_permission(db, permission_id)
    if body.permission_name is not None and body.permission_name != permission.permission_name:
        if find_permission_by_name(db, body.permission_name) is not None:
            raise ConflictError(ErrorKind.DUPLICATE_PERMISSION_NAME)
        permission.permission_name = body.permission_name
    if body.description is not None:
        permission.description = body.description
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(ErrorKind.DUPLICATE_PERMISSION_NAME) from e
    db.refresh(permission)
    return permission


def delete_permission(db: Session, permission_id: int) -> None:
    """Delete a permission and detach it from every role."""
    permission = get_permission(db, permission_id)
    db.query(RolePermission).filter(RolePermission.permission_id == permission_id).delete(
        synchronize_session=False
    )
    db.delete(permission)
    db.commit()
    logger.info("Permission deleted: id=%s", permission_id)
