"""
Seed the permissions the gate checks, the default role and an Admin role.
Run from project root (safe to re-run):
  python -m warden.scripts.seed
"""
import logging
import sys

from sqlalchemy.orm import Session

from warden.core.authorization import all_permission_names
from warden.core.config import get_settings
from warden.core.database import SessionLocal
from warden.models import Permission, Role, RolePermission

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

ADMIN_ROLE_NAME = "Admin"


def _ensure_role(db: Session, role_name: str, description: str) -> Role:
    role = db.query(Role).filter(Role.role_name == role_name).first()
    if role is None:
        role = Role(role_name=role_name, description=description)
        db.add(role)
        db.flush()
        logger.info("Created role %s", role_name)
    return role


def seed(db: Session) -> None:
    """Create missing permissions and roles and grant Admin every permission."""
    settings = get_settings()
    _ensure_role(db, settings.DEFAULT_ROLE_NAME, "Default role for registered users")
    admin = _ensure_role(db, ADMIN_ROLE_NAME, "Full administration rights")

    for name in all_permission_names():
        permission = db.query(Permission).filter(Permission.permission_name == name).first()
        if permission is None:
            permission = Permission(permission_name=name, description=name)
            db.add(permission)
            db.flush()
            logger.info("Created permission %s", name)
        linked = (
            db.query(RolePermission)
            .filter(
                RolePermission.role_id == admin.id,
                RolePermission.permission_id == permission.id,
            )
            .first()
        )
        if linked is None:
            db.add(RolePermission(role_id=admin.id, permission_id=permission.id))
    db.commit()


def main() -> int:
    db = SessionLocal()
    try:
        seed(db)
        logger.info("Seed completed")
        return 0
    except Exception as e:
        db.rollback()
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
