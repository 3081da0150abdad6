"""ORM models for roles, permissions and the two association tables."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from warden.models.base import Base


class Role(Base):
    """Named bundle of permissions, e.g. RegularUser or Admin."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)


class Permission(Base):
    """Capability string checked by the request gate, e.g. user:view."""

    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    permission_name = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)


class UserRole(Base):
    """user <-> role link; the composite key keeps each pair unique."""

    __tablename__ = "user_roles"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )


class RolePermission(Base):
    """role <-> permission link; the composite key keeps each pair unique."""

    __tablename__ = "role_permissions"

    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    permission_id = Column(
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
