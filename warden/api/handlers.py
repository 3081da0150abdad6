"""
Exception handlers that turn every failure into the {success, message, data} envelope.

All envelopes go out with HTTP 200; clients read `success` instead of the status.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from warden.core.errors import DEFAULT_MESSAGES, ErrorKind, RbacError
from warden.schemas.envelope import ApiResponse

logger = logging.getLogger(__name__)

# Outcomes worth a warning: someone tried something they may not do.
_ACCESS_KINDS = frozenset(
    {ErrorKind.NOT_AUTHENTICATED, ErrorKind.PERMISSION_DENIED, ErrorKind.INVALID_CREDENTIALS}
)
# Outcomes that point at broken deployment state rather than bad input.
_OPERATOR_KINDS = frozenset({ErrorKind.MISSING_DEFAULT_ROLE, ErrorKind.INTERNAL})


def failure_response(message: str) -> JSONResponse:
    """Build a success=false envelope."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=ApiResponse.fail(message).model_dump(mode="json"),
    )


def rbac_error_handler(request: Request, exc: RbacError) -> JSONResponse:
    if exc.kind in _OPERATOR_KINDS:
        logger.error("%s on %s: %s", exc.kind.value, request.url.path, exc.message)
    elif exc.kind in _ACCESS_KINDS:
        logger.warning("%s on %s", exc.kind.value, request.url.path)
    else:
        logger.info("%s on %s: %s", exc.kind.value, request.url.path, exc.message)
    return failure_response(exc.message)


def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first invalid field, e.g. 'username: String should have at least 1 character'."""
    errors = exc.errors()
    message = DEFAULT_MESSAGES[ErrorKind.VALIDATION_FAILED]
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = first.get("msg", "Invalid value")
        message = f"{field}: {detail}" if field else detail
    logger.info("Validation failed on %s: %s", request.url.path, message)
    return failure_response(message)


def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Driver messages can include SQL and parameters; keep them in the log only.
    logger.exception("Database error on %s", request.url.path)
    return failure_response("Database error.")


def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s: %s", request.url.path, type(exc).__name__)
    return failure_response(DEFAULT_MESSAGES[ErrorKind.INTERNAL])


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all envelope handlers to the app."""
    app.add_exception_handler(RbacError, rbac_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
