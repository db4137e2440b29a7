"""Password hashing and session token primitives."""

from datetime import UTC, datetime, timedelta

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from wattboard.core.exceptions import TokenExpiredError, TokenInvalidError
from wattboard.schemas.user import TokenData

# bcrypt ignores (and newer releases reject) input beyond this many bytes
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, raw: str) -> str:
        """Hash a password with a fresh random salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(raw.encode("utf-8"), salt).decode("utf-8")

    def verify(self, raw: str, hashed: str) -> bool:
        """Check a password against a stored hash.

        Malformed hashes and over-long input are treated as a mismatch.
        """
        try:
            return bcrypt.checkpw(raw.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False


class TokenService:
    """Issues and verifies signed, time-limited JWT session tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        default_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.default_ttl = default_ttl

    def issue(
        self,
        user_id: int,
        username: str | None = None,
        ttl: timedelta | None = None,
    ) -> str:
        """Create a token for a user that expires after ``ttl``."""
        now = datetime.now(UTC)
        claims: dict = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + (ttl if ttl is not None else self.default_ttl),
        }
        if username is not None:
            claims["username"] = username
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenData:
        """Decode a token, raising TokenExpiredError or TokenInvalidError."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except JWTError as exc:
            raise TokenInvalidError() from exc

        subject = payload.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError) as exc:
            raise TokenInvalidError() from exc
        return TokenData(user_id=user_id, username=payload.get("username"))

    def refresh(self, token_data: TokenData) -> str:
        """Issue a fresh token for an identity that has already been verified."""
        return self.issue(token_data.user_id, token_data.username)
