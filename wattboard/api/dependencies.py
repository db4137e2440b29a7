"""Dependency providers that build services from settings, plus token auth."""

from datetime import timedelta

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from wattboard.core.config import settings
from wattboard.core.database import get_db
from wattboard.core.exceptions import UnauthorizedError
from wattboard.core.security import PasswordHasher, TokenService
from wattboard.schemas.user import TokenData
from wattboard.services.auth import AuthService
from wattboard.services.credentials import CredentialStore
from wattboard.services.energy import ApplianceAggregator
from wattboard.services.leaderboard import LeaderboardRanker
from wattboard.services.notifications import (
    LogNotificationSender,
    NotificationSender,
    SmtpNotificationSender,
)


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def get_token_service() -> TokenService:
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        default_ttl=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    )


def get_notification_sender() -> NotificationSender:
    """SMTP sender when SMTP_HOST is configured, otherwise a log-only sender."""
    if not settings.SMTP_HOST:
        return LogNotificationSender()
    return SmtpNotificationSender(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD,
        use_tls=settings.SMTP_USE_TLS,
        sender=settings.EMAIL_FROM,
    )


def get_credential_store(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CredentialStore:
    return CredentialStore(db, hasher)


def get_auth_service(
    store: CredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    notifier: NotificationSender = Depends(get_notification_sender),
) -> AuthService:
    return AuthService(
        store=store,
        hasher=hasher,
        tokens=tokens,
        notifier=notifier,
        reset_token_ttl=timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
        password_reset_url=settings.PASSWORD_RESET_URL,
    )


def get_appliance_aggregator(db: Session = Depends(get_db)) -> ApplianceAggregator:
    return ApplianceAggregator(db)


def get_leaderboard_ranker(db: Session = Depends(get_db)) -> LeaderboardRanker:
    return LeaderboardRanker(db)


def get_current_token(
    x_auth_token: str | None = Header(None),
    authorization: str | None = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> TokenData:
    """Verify the session token from ``x-auth-token`` or ``Authorization: Bearer``.

    Raises UnauthorizedError (missing), TokenExpiredError or TokenInvalidError.
    """
    token = x_auth_token
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError()
    return tokens.verify(token)
