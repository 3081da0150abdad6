"""Credential store: registration, login and user profile management."""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warden.core.config import get_settings
from warden.core.errors import (
    BootstrapError,
    ConflictError,
    CredentialError,
    ErrorKind,
    NotFoundError,
)
from warden.core.security import hash_password, verify_password
from warden.models import User, UserRole, UserSession
from warden.schemas.rbac import UserRead, UserUpdate
from warden.services import roles as role_store

logger = logging.getLogger(__name__)


def _find_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def register(db: Session, username: str, password: str, email: str | None = None) -> User:
    """
    Create a user with a bcrypt-hashed password and give it the default role.

    The user row and the default-role link commit together: if the default
    role has not been seeded the insert is rolled back.
    """
    if _find_by_username(db, username) is not None:
        raise CredentialError(ErrorKind.DUPLICATE_USERNAME)

    default_role_name = get_settings().DEFAULT_ROLE_NAME
    user = User(
        username=username,
        password_hash=hash_password(password),
        email=email,
        created_at=datetime.now(timezone.utc),
    )
    try:
        db.add(user)
        db.flush()
        default_role = role_store.find_role_by_name(db, default_role_name)
        if default_role is None:
            raise BootstrapError(
                ErrorKind.MISSING_DEFAULT_ROLE,
                f"Default role '{default_role_name}' does not exist.",
            )
        role_store.link_user_role(db, user.id, default_role.id, commit=False)
        db.commit()
    except IntegrityError as e:
        # Lost a race with another registration of the same username.
        db.rollback()
        raise CredentialError(ErrorKind.DUPLICATE_USERNAME) from e
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("User registered: id=%s, username=%s", user.id, user.username)
    return user


def login(db: Session, username: str, password: str) -> User:
    """Return the user for valid credentials; one generic error otherwise."""
    user = _find_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Login failed: username=%s", username)
        raise CredentialError(ErrorKind.INVALID_CREDENTIALS)
    return user


def list_users(db: Session) -> list[User]:
    """All users, without roles."""
    return db.query(User).order_by(User.id).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(ErrorKind.USER_NOT_FOUND)
    return user


def get_user_with_roles(db: Session, user_id: int) -> UserRead:
    """Load a user, its roles and each role's permissions."""
    user = get_user(db, user_id)
    return UserRead(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
        roles=[role_store.load_role(db, role) for role in role_store.roles_for_user(db, user.id)],
    )


def update_profile(db: Session, user_id: int, body: UserUpdate) -> User:
    """
    Update username and/or email.

    body.password is ignored: the stored hash is never touched here.
    """
    user = get_user(db, user_id)
    if body.username is not None and body.username != user.username:
        if _find_by_username(db, body.username) is not None:
            raise ConflictError(ErrorKind.DUPLICATE_USERNAME)
        user.username = body.username
    if body.email is not None:
        user.email = body.email
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(ErrorKind.DUPLICATE_USERNAME) from e
    db.refresh(user)
    logger.info("User updated: id=%s", user.id)
    return user


def delete_user(db: Session, user_id: int) -> None:
    """Delete a user along with its role links and open sessions."""
    user = get_user(db, user_id)
    db.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session=False)
    db.query(UserSession).filter(UserSession.user_id == user_id).delete(
        synchronize_session=False
    )
    db.delete(user)
    db.commit()
    logger.info("User deleted: id=%s", user_id)


def assign_role_to_user(db: Session, user_id: int, role_id: int) -> bool:
    return role_store.link_user_role(db, user_id, role_id)


def remove_role_from_user(db: Session, user_id: int, role_id: int) -> bool:
    return role_store.unlink_user_role(db, user_id, role_id)
