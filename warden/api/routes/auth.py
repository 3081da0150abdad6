"""Registration, session login/logout and the current-user lookup."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from warden.api.routes.deps import get_session_id
from warden.core.config import get_settings
from warden.core.database import get_db
from warden.core.errors import AccessError, ErrorKind, NotFoundError
from warden.schemas.auth import LoginRequest, RegisterRequest
from warden.schemas.envelope import ApiResponse
from warden.schemas.rbac import UserRead
from warden.services import sessions as session_store
from warden.services import users as user_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=ApiResponse[UserRead])
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserRead]:
    """Create an account; it starts with the default role."""
    user = user_store.register(db, body.username, body.password, body.email)
    return ApiResponse.ok(UserRead.model_validate(user), "Registered successfully")


@router.post("/login", response_model=ApiResponse[str])
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[str]:
    """
    Check credentials and open a server-side session.

    The session id is set as an HTTP-only cookie and also returned as `data`.
    """
    user = user_store.login(db, body.username, body.password)
    session_id = session_store.open_session(db, user.id)
    settings = get_settings()
    # Browser-session cookie; expiry is the server's sliding idle timeout only.
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info("Login succeeded: user_id=%s", user.id)
    return ApiResponse.ok(session_id, "Login successful")


@router.get("/logout", response_model=ApiResponse[None])
def logout(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> ApiResponse[None]:
    """Destroy the session. Succeeds even when nobody is logged in."""
    session_store.close_session(db, session_id)
    response.delete_cookie(get_settings().SESSION_COOKIE_NAME)
    return ApiResponse.ok(None, "Logged out")


@router.get("/current-user", response_model=ApiResponse[UserRead])
def current_user(
    db: Annotated[Session, Depends(get_db)],
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> ApiResponse[UserRead]:
    """The logged-in user with roles and each role's permissions."""
    user_id = session_store.resolve_session(db, session_id)
    if user_id is None:
        raise AccessError(ErrorKind.NOT_AUTHENTICATED, "Not logged in.")
    try:
        user = user_store.get_user_with_roles(db, user_id)
    except NotFoundError:
        raise AccessError(ErrorKind.NOT_AUTHENTICATED, "Not logged in.") from None
    return ApiResponse.ok(user)
