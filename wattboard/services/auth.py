"""Authentication service: registration, login and password reset."""

import logging
import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from wattboard.core.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    ValidationError,
)
from wattboard.core.security import BCRYPT_MAX_PASSWORD_BYTES, PasswordHasher, TokenService
from wattboard.schemas.user import AuthResponse, TokenData, UserResponse
from wattboard.services.credentials import CredentialStore
from wattboard.services.notifications import NotificationSender

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 20

_email_adapter = TypeAdapter(EmailStr)

RESET_EMAIL_SUBJECT = "Password Reset Request"
RESET_EMAIL_BODY = """\
Hello {username},

We received a request to reset your password. Open the link below within
{minutes} minutes to choose a new one:

{link}

If you did not request a reset, you can ignore this email.
"""


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they were stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _require(**fields: str | None) -> None:
    """Raise ValidationError naming the first empty field."""
    for name, value in fields.items():
        if value is None or not value.strip():
            raise ValidationError(f"{name.replace('_', ' ').capitalize()} is required")


@lru_cache
def _dummy_hash(rounds: int) -> str:
    """Hash compared against when the account does not exist."""
    return PasswordHasher(rounds).hash(secrets.token_hex(16))


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long"
        )


def _check_email(email: str) -> None:
    try:
        _email_adapter.validate_python(email)
    except PydanticValidationError as e:
        raise ValidationError("Invalid email address") from e


class AuthService:
    """Account lifecycle on top of the credential store and token service."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        notifier: NotificationSender,
        reset_token_ttl: timedelta = timedelta(hours=1),
        password_reset_url: str = "http://localhost:3000/reset-password",
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.notifier = notifier
        self.reset_token_ttl = reset_token_ttl
        self.password_reset_url = password_reset_url

    def register(self, email: str, username: str, raw_password: str) -> AuthResponse:
        """
        Register a new user and sign them in.

        Raises:
            ValidationError: If a field is empty, the email is malformed or
                the password is too long
            ConflictError: If the email or username is already registered

        """
        _require(email=email, username=username, password=raw_password)
        _check_email(email.strip())
        _check_password_length(raw_password)

        user = self.store.create(email.strip(), username.strip(), raw_password)
        token = self.tokens.issue(user.id, user.username)
        return AuthResponse(token=token, user=UserResponse.model_validate(user))

    def login(self, identifier: str | None, raw_password: str | None) -> AuthResponse:
        """
        Authenticate by email or username.

        Unknown accounts and wrong passwords raise the same InvalidCredentialsError.
        """
        _require(email_or_username=identifier, password=raw_password)

        user = self.store.find_by_identifier(identifier.strip())
        if not user:
            # Spend the same bcrypt time as a real check
            self.hasher.verify(raw_password, _dummy_hash(self.hasher.rounds))
            logger.info("Login failed: unknown account")
            raise InvalidCredentialsError()
        if not self.hasher.verify(raw_password, user.hashed_password):
            logger.info("Login failed: wrong password for user id=%s", user.id)
            raise InvalidCredentialsError()

        token = self.tokens.issue(user.id, user.username)
        return AuthResponse(token=token, user=UserResponse.model_validate(user))

    def get_profile(self, user_id: int) -> UserResponse:
        user = self.store.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserResponse.model_validate(user)

    def request_password_reset(self, email: str) -> None:
        """
        Create a single-use reset token and email a link containing it.

        Raises:
            NotFoundError: If no account uses this email; nothing is sent
            NotificationError: If the email could not be delivered

        """
        _require(email=email)
        user = self.store.find_by_email(email.strip())
        if not user:
            raise NotFoundError("No account with that email address")

        token = secrets.token_hex(RESET_TOKEN_BYTES)
        expires_at = datetime.now(UTC) + self.reset_token_ttl
        self.store.set_reset_token(user.id, token, expires_at)

        body = RESET_EMAIL_BODY.format(
            username=user.username,
            minutes=int(self.reset_token_ttl.total_seconds() // 60),
            link=f"{self.password_reset_url}?token={token}",
        )
        self.notifier.send(user.email, RESET_EMAIL_SUBJECT, body)
        logger.info("Password reset requested for user id=%s", user.id)

    def confirm_password_reset(self, token: str, new_raw_password: str) -> None:
        """
        Set a new password using a reset token; the token cannot be used again.

        Raises:
            ValidationError: If the token or password is empty
            InvalidOrExpiredTokenError: If the token is unknown, used or expired

        """
        _require(token=token, new_password=new_raw_password)
        _check_password_length(new_raw_password)

        user = self.store.find_by_reset_token(token)
        if not user or user.reset_token_expires_at is None:
            raise InvalidOrExpiredTokenError()
        if _as_utc(user.reset_token_expires_at) < datetime.now(UTC):
            raise InvalidOrExpiredTokenError()

        self.store.update_password(user.id, new_raw_password)
        logger.info("Password reset completed for user id=%s", user.id)

    def verify_token(self, token: str) -> TokenData:
        return self.tokens.verify(token)

    def refresh_token(self, token_data: TokenData) -> str:
        return self.tokens.refresh(token_data)

