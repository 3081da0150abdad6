"""Server-side sessions: opaque id -> user id, with an idle timeout."""

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from warden.core.config import get_settings
from warden.core.security import new_session_token
from warden.models import UserSession

if TYPE_CHECKING:
    from warden.core.config import Settings

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _idle_cutoff(settings: "Settings", now: datetime) -> datetime:
    return now - timedelta(minutes=settings.SESSION_IDLE_TIMEOUT_MINUTES)


def open_session(db: Session, user_id: int, now: datetime | None = None) -> str:
    """Create a session for user_id and return its id."""
    now = now or datetime.now(timezone.utc)
    session_id = new_session_token()
    db.add(UserSession(id=session_id, user_id=user_id, created_at=now, last_seen_at=now))
    db.commit()
    logger.info("Session opened: user_id=%s", user_id)
    return session_id


def resolve_session(
    db: Session,
    session_id: str | None,
    settings: "Settings | None" = None,
    now: datetime | None = None,
) -> int | None:
    """
    Return the user id bound to session_id, or None when anonymous.

    A session idle for longer than SESSION_IDLE_TIMEOUT_MINUTES is deleted on
    sight and treated exactly like a missing one. A live session's
    last_seen_at is moved forward.
    """
    if not session_id:
        return None
    settings = settings or get_settings()
    now = now or datetime.now(timezone.utc)

    record = db.get(UserSession, session_id)
    if record is None:
        return None
    user_id = record.user_id
    if _as_utc(record.last_seen_at) < _idle_cutoff(settings, now):
        db.delete(record)
        db.commit()
        logger.info("Session expired: user_id=%s", user_id)
        return None

    record.last_seen_at = now
    db.commit()
    return user_id


def close_session(db: Session, session_id: str | None) -> bool:
    """Destroy a session. Returns False if there was nothing to destroy."""
    if not session_id:
        return False
    deleted = (
        db.query(UserSession)
        .filter(UserSession.id == session_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Session closed")
    return deleted > 0


def sweep_expired_sessions(
    db: Session, settings: "Settings", now: datetime | None = None
) -> int:
    """
    Delete every session idle past the timeout. Idempotent: safe to run repeatedly.

    Returns the number of sessions removed.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = _idle_cutoff(settings, now)
    deleted_count = (
        db.query(UserSession)
        .filter(UserSession.last_seen_at < cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()

    if deleted_count > 0:
        logger.info(
            "Session sweep: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
