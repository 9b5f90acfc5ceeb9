"""Service errors. Each one knows the HTTP status it is reported with."""


class ServiceError(Exception):
    """Base exception for all account and settings errors."""

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


# Input
class InvalidInputError(ServiceError):
    """Missing or malformed request data."""

    default_message = "Invalid input"


class OutOfRangeError(InvalidInputError):
    """A coerced value fell outside its allowed range."""

    default_message = "Invalid timezone offset. Must be between -12.0 and +14.0"


# Credentials
class AuthenticationFailedError(ServiceError):
    status_code = 401
    default_message = "Invalid username or password"


class ConflictError(ServiceError):
    """Username already registered. Reported as 400 like other signup rejections."""

    default_message = "Username already exists"


# Access gate
class _UnauthorizedError(ServiceError):
    status_code = 401

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class MissingTokenError(_UnauthorizedError):
    default_message = "No token provided"


class InvalidTokenError(_UnauthorizedError):
    default_message = "Invalid token"


# Resources
class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Settings not found for this user"


class ServiceUnavailableError(ServiceError):
    """Store failure or timeout."""

    status_code = 500
    default_message = "Internal server error"
