"""ORM model for application users (credentials and profile)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from warden.models.base import Base


class User(Base):
    """
    User account for session authentication.

    Roles are not stored on this row; they come from user_roles and are
    loaded only when a caller asks for them.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
