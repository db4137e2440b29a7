"""Credential store: persisted user accounts and their password-reset state."""

import hashlib
import logging
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wattboard.core.database import storage_scope
from wattboard.core.exceptions import ConflictError
from wattboard.core.security import PasswordHasher
from wattboard.models.user import User

logger = logging.getLogger(__name__)


def _digest(token: str) -> str:
    """SHA-256 hex digest of a reset token; the raw token is never stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class CredentialStore:
    """User records backed by a SQLAlchemy session.

    Lookups return None when nothing matches. Database failures roll the
    session back and surface as StorageError.
    """

    def __init__(self, db: Session, hasher: PasswordHasher) -> None:
        self.db = db
        self.hasher = hasher

    def find_by_id(self, user_id: int) -> User | None:
        with storage_scope(self.db, "look up user by id"):
            return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        with storage_scope(self.db, "look up user by email"):
            return self.db.query(User).filter(User.email == email).first()

    def find_by_username(self, username: str) -> User | None:
        with storage_scope(self.db, "look up user by username"):
            return self.db.query(User).filter(User.username == username).first()

    def find_by_identifier(self, identifier: str) -> User | None:
        """Find a user by email or username."""
        if "@" in identifier:
            user = self.find_by_email(identifier)
            if user:
                return user
        return self.find_by_username(identifier)

    def find_by_reset_token(self, token: str) -> User | None:
        with storage_scope(self.db, "look up reset token"):
            return self.db.query(User).filter(User.reset_token_hash == _digest(token)).first()

    def create(self, email: str, username: str, raw_password: str) -> User:
        """Create a user, storing only the password hash.

        Raises:
            ConflictError: If the username or email is already registered

        """
        with storage_scope(self.db, "create user"):
            existing = (
                self.db.query(User)
                .filter(or_(User.username == username, User.email == email))
                .first()
            )
            if existing:
                if existing.username == username:
                    raise ConflictError("Username already registered")
                raise ConflictError("Email already registered")

            user = User(
                email=email,
                username=username,
                hashed_password=self.hasher.hash(raw_password),
            )
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError as exc:
                # Lost a race with a concurrent registration
                self.db.rollback()
                raise ConflictError() from exc
            self.db.refresh(user)
            logger.info("Registered user id=%s", user.id)
            return user

    def update_password(self, user_id: int, new_raw_password: str) -> User | None:
        """Replace a user's password and drop any pending reset token."""
        with storage_scope(self.db, "update password"):
            user = self.db.get(User, user_id)
            if not user:
                return None
            user.hashed_password = self.hasher.hash(new_raw_password)
            user.reset_token_hash = None
            user.reset_token_expires_at = None
            self.db.commit()
            self.db.refresh(user)
            return user

    def set_reset_token(self, user_id: int, token: str, expires_at: datetime) -> User | None:
        with storage_scope(self.db, "store reset token"):
            user = self.db.get(User, user_id)
            if not user:
                return None
            user.reset_token_hash = _digest(token)
            user.reset_token_expires_at = expires_at
            self.db.commit()
            self.db.refresh(user)
            return user

    def clear_reset_token(self, user_id: int) -> bool:
        with storage_scope(self.db, "clear reset token"):
            user = self.db.get(User, user_id)
            if not user:
                return False
            user.reset_token_hash = None
            user.reset_token_expires_at = None
            self.db.commit()
            return True
