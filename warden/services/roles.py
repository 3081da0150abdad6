"""Role store: role CRUD, joined lookups and the two association tables."""

import logging

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warden.core.errors import ConflictError, ErrorKind, NotFoundError
from warden.models import Permission, Role, RolePermission, User, UserRole
from warden.schemas.rbac import PermissionRead, RoleCreate, RoleRead, RoleUpdate

logger = logging.getLogger(__name__)


def list_roles(db: Session) -> list[Role]:
    """All roles, without permissions."""
    return db.query(Role).order_by(Role.id).all()


def get_role(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise NotFoundError(ErrorKind.ROLE_NOT_FOUND)
    return role


def find_role_by_name(db: Session, role_name: str) -> Role | None:
    return db.query(Role).filter(Role.role_name == role_name).first()


def roles_for_user(db: Session, user_id: int) -> list[Role]:
    """Roles linked to a user, in join order."""
    return (
        db.query(Role)
        .join(UserRole, UserRole.role_id == Role.id)
        .filter(UserRole.user_id == user_id)
        .order_by(Role.id)
        .all()
    )


def permissions_for_role(db: Session, role_id: int) -> list[Permission]:
    """Permissions linked to a role, in join order."""
    return (
        db.query(Permission)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .filter(RolePermission.role_id == role_id)
        .order_by(Permission.id)
        .all()
    )


def load_role(db: Session, role: Role) -> RoleRead:
    """Build a RoleRead with its permission list filled in."""
    permissions = permissions_for_role(db, role.id)
    return RoleRead(
        id=role.id,
        role_name=role.role_name,
        description=role.description,
        permissions=[PermissionRead.model_validate(p) for p in permissions],
    )


def get_role_with_permissions(db: Session, role_id: int) -> RoleRead:
    return load_role(db, get_role(db, role_id))


def create_role(db: Session, body: RoleCreate) -> Role:
    if find_role_by_name(db, body.role_name) is not None:
        raise ConflictError(ErrorKind.DUPLICATE_ROLE_NAME)
    role = Role(role_name=body.role_name, description=body.description)
    db.add(role)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(ErrorKind.DUPLICATE_ROLE_NAME) from e
    db.refresh(role)
    logger.info("Role created: id=%s, name=%s", role.id, role.role_name)
    return role


def update_role(db: Session, role_id: int, body: RoleUpdate) -> Role:
    """Apply the non-null fields of body to the role."""
    role = get_role(db, role_id)
    if body.role_name is not None and body.role_name != role.role_name:
        if find_role_by_name(db, body.role_name) is not None:
            raise ConflictError(ErrorKind.DUPLICATE_ROLE_NAME)
        role.role_name = body.role_name
    if body.description is not None:
        role.description = body.description
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(ErrorKind.DUPLICATE_ROLE_NAME) from e
    db.refresh(role)
    return role


def delete_role(db: Session, role_id: int) -> None:
    """Delete a role together with every user and permission link that references it."""
    role = get_role(db, role_id)
    db.query(RolePermission).filter(RolePermission.role_id == role_id).delete(
        synchronize_session=False
    )
    db.query(UserRole).filter(UserRole.role_id == role_id).delete(synchronize_session=False)
    db.delete(role)
    db.commit()
    logger.info("Role deleted: id=%s", role_id)


def _user_role_exists(db: Session, user_id: int, role_id: int) -> bool:
    return (
        db.query(UserRole)
        .filter(and_(UserRole.user_id == user_id, UserRole.role_id == role_id))
        .first()
        is not None
    )


def _role_permission_exists(db: Session, role_id: int, permission_id: int) -> bool:
    return (
        db.query(RolePermission)
        .filter(
            and_(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        .first()
        is not None
    )


def link_user_role(db: Session, user_id: int, role_id: int, *, commit: bool = True) -> bool:
    """
    Give a user a role. Returns True if a link row was written.

    An existing link is left alone. If a concurrent request inserts the same
    pair first, the primary-key violation is rolled back and treated as a no-op.
    With commit=False the row is only flushed, for callers that own the transaction.
    """
    if db.get(User, user_id) is None:
        raise NotFoundError(ErrorKind.USER_NOT_FOUND)
    get_role(db, role_id)
    if _user_role_exists(db, user_id, role_id):
        return False
    db.add(UserRole(user_id=user_id, role_id=role_id))
    if not commit:
        db.flush()
        return True
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if _user_role_exists(db, user_id, role_id):
            logger.info("Concurrent user-role link absorbed: user_id=%s, role_id=%s", user_id, role_id)
            return False
        raise
    logger.info("Role assigned: user_id=%s, role_id=%s", user_id, role_id)
    return True


def unlink_user_role(db: Session, user_id: int, role_id: int) -> bool:
    """Remove a user's role; a missing link is not an error. Returns True if a row went away."""
    deleted = (
        db.query(UserRole)
        .filter(and_(UserRole.user_id == user_id, UserRole.role_id == role_id))
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Role removed: user_id=%s, role_id=%s", user_id, role_id)
    return deleted > 0


def link_role_permission(db: Session, role_id: int, permission_id: int) -> bool:
    """Attach a permission to a role. Same idempotency rules as link_user_role."""
    get_role(db, role_id)
    if db.get(Permission, permission_id) is None:
        raise NotFoundError(ErrorKind.PERMISSION_NOT_FOUND)
    if _role_permission_exists(db, role_id, permission_id):
        return False
    db.add(RolePermission(role_id=role_id, permission_id=permission_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if _role_permission_exists(db, role_id, permission_id):
            logger.info(
                "Concurrent role-permission link absorbed: role_id=%s, permission_id=%s",
                role_id,
                permission_id,
            )
            return False
        raise
    logger.info("Permission granted: role_id=%s, permission_id=%s", role_id, permission_id)
    return True


def unlink_role_permission(db: Session, role_id: int, permission_id: int) -> bool:
    """Detach a permission from a role; a missing link is not an error."""
    deleted = (
        db.query(RolePermission)
        .filter(
            and_(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Permission revoked: role_id=%s, permission_id=%s", role_id, permission_id)
    return deleted > 0
