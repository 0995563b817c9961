"""Application error taxonomy.

Every business-rule failure raised by the services is an ``AppError`` with a
stable ``kind``. ``main.py`` turns them into ``{"detail": ..., "kind": ...}``
JSON responses.
"""


class AppError(Exception):
    """Base class for failures surfaced to API clients."""

    kind: str = "ServerError"
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class DuplicateEmailError(AppError):
    kind = "DuplicateEmail"
    status_code = 400
    default_message = "User already exists"


class InvalidCredentialsError(AppError):
    kind = "InvalidCredentials"
    status_code = 401
    default_message = "Invalid credentials"


class NotVerifiedError(AppError):
    kind = "NotVerified"
    status_code = 403
    default_message = "User not verified. Please contact administrator."


class MissingTokenError(AppError):
    kind = "MissingToken"
    status_code = 401
    default_message = "Not authorized, no token"


class InvalidTokenError(AppError):
    kind = "InvalidToken"
    status_code = 401
    default_message = "Invalid token"


class ExpiredTokenError(AppError):
    kind = "ExpiredToken"
    status_code = 401
    default_message = "Token has expired"


class UserNotFoundError(AppError):
    kind = "UserNotFound"
    status_code = 401
    default_message = "User not found"


class NotAuthenticatedError(AppError):
    kind = "Unauthenticated"
    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(AppError):
    kind = "Forbidden"
    status_code = 403
    default_message = "You are not authorized to access this route"


class InvalidProviderTokenError(AppError):
    kind = "InvalidProviderToken"
    status_code = 401
    default_message = "Google authentication failed"


class ValidationFailedError(AppError):
    kind = "ValidationError"
    status_code = 400
    default_message = "Validation failed"


class NotFoundError(AppError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"
