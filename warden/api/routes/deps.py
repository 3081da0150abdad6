"""Shared route dependencies: session cookie lookup and the permission gate."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from warden.core.authorization import authorize
from warden.core.config import get_settings
from warden.core.database import get_db


def get_session_id(request: Request) -> str | None:
    """Session id from the cookie, or None."""
    return request.cookies.get(get_settings().SESSION_COOKIE_NAME)


def gate(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> None:
    """
    Router-level dependency: look up the matched endpoint's operation name and
    run it through authorize() before the endpoint body executes.
    """
    endpoint = request.scope.get("endpoint")
    operation = getattr(endpoint, "__name__", "")
    authorize(db, session_id, operation)
