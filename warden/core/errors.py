"""Typed service errors. Each carries an ErrorKind that the API boundary matches on."""

from enum import Enum


class ErrorKind(str, Enum):
    """Every failure a service or the request gate can report."""

    DUPLICATE_USERNAME = "duplicate_username"
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_NOT_FOUND = "user_not_found"
    ROLE_NOT_FOUND = "role_not_found"
    PERMISSION_NOT_FOUND = "permission_not_found"
    NOT_AUTHENTICATED = "not_authenticated"
    PERMISSION_DENIED = "permission_denied"
    MISSING_DEFAULT_ROLE = "missing_default_role"
    DUPLICATE_ROLE_NAME = "duplicate_role_name"
    DUPLICATE_PERMISSION_NAME = "duplicate_permission_name"
    VALIDATION_FAILED = "validation_failed"
    INTERNAL = "internal"


# Default client-facing text per kind. Login failures share one message so
# unknown usernames and wrong passwords are indistinguishable.
DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.DUPLICATE_USERNAME: "Username already exists.",
    ErrorKind.INVALID_CREDENTIALS: "Invalid username or password.",
    ErrorKind.USER_NOT_FOUND: "User not found.",
    ErrorKind.ROLE_NOT_FOUND: "Role not found.",
    ErrorKind.PERMISSION_NOT_FOUND: "Permission not found.",
    ErrorKind.NOT_AUTHENTICATED: "Please log in first.",
    ErrorKind.PERMISSION_DENIED: "Permission denied.",
    ErrorKind.MISSING_DEFAULT_ROLE: "Default role is not configured.",
    ErrorKind.DUPLICATE_ROLE_NAME: "Role name already exists.",
    ErrorKind.DUPLICATE_PERMISSION_NAME: "Permission name already exists.",
    ErrorKind.VALIDATION_FAILED: "Invalid request.",
    ErrorKind.INTERNAL: "An unexpected error occurred.",
}


class RbacError(Exception):
    """Base error raised by services; `kind` says what went wrong, `message` is client-safe."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)


class CredentialError(RbacError):
    """Registration or login rejected."""


class NotFoundError(RbacError):
    """A user, role or permission id did not resolve."""


class ConflictError(RbacError):
    """A unique name is already taken."""


class AccessError(RbacError):
    """The request gate refused the call."""


class BootstrapError(RbacError):
    """Required seed data (the default role) is missing."""
