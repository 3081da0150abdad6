"""ORM model for server-side login sessions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from warden.models.base import Base


class UserSession(Base):
    """
    One authenticated session, keyed by the opaque id handed to the client.

    Only user_id is trusted; the user's roles are re-read on every gated call.
    last_seen_at drives the idle timeout.
    """

    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    last_seen_at = Column(DateTime(timezone=True), nullable=False, index=True)
