"""Domain exceptions and the HTTP status each one maps to."""

from fastapi import status


class WattboardError(Exception):
    """Base class for errors that are translated into HTTP responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(WattboardError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class ConflictError(WattboardError):
    """Email or username already registered."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class InvalidCredentialsError(WattboardError):
    """Unknown account or wrong password; deliberately indistinguishable."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class InvalidOrExpiredTokenError(WattboardError):
    """Password reset token is unknown, already used or expired."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Password reset token is invalid or has expired"


class NotFoundError(WattboardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class UnauthorizedError(WattboardError):
    """Missing or unusable session token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No token, authorization denied"


class TokenExpiredError(UnauthorizedError):
    default_message = "Token has expired"


class TokenInvalidError(UnauthorizedError):
    default_message = "Invalid token"


class StorageError(WattboardError):
    """Unexpected database failure. The message is for logs only."""


class NotificationError(WattboardError):
    """Outbound notification could not be delivered. The message is for logs only."""
