"""
CLI entrypoint for the idle-session sweep. Run from cron, e.g.:

  python -m warden.session_sweep

Or every 15 minutes: */15 * * * * cd /path/to/warden && .venv/bin/python -m warden.session_sweep
"""

import logging
import sys

from warden.core.config import get_settings
from warden.core.database import SessionLocal
from warden.services.sessions import sweep_expired_sessions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete sessions idle longer than SESSION_IDLE_TIMEOUT_MINUTES."""
    settings = get_settings()
    db = SessionLocal()
    try:
        sessions_deleted = sweep_expired_sessions(db, settings)
        logger.info("Session sweep completed: sessions_deleted=%s", sessions_deleted)
        return 0
    except Exception as e:
        logger.exception("Session sweep failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
