"""Application configuration settings."""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Documented insecure fallback, only accepted while DEBUG is enabled.
DEFAULT_SECRET_KEY = "dev-secret-key-change-this-in-production"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Wattboard"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./wattboard.db"

    # JWT Authentication
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10

    # Password reset
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    PASSWORD_RESET_URL: str = "http://localhost:3000/reset-password"

    # Outbound mail; an empty SMTP_HOST logs notifications instead of sending
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    EMAIL_FROM: str = "Wattboard <no-reply@wattboard.local>"

    CORS_ORIGINS: list[str] = ["*"]

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt only accepts cost factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @model_validator(mode="after")
    def require_secret_in_production(self) -> "Settings":
        """Refuse to start outside debug mode without a real signing key."""
        if not self.DEBUG and self.SECRET_KEY in ("", DEFAULT_SECRET_KEY):
            raise ValueError("SECRET_KEY must be set when DEBUG is disabled")
        return self

    @property
    def uses_default_secret(self) -> bool:
        return self.SECRET_KEY == DEFAULT_SECRET_KEY


settings = Settings()
