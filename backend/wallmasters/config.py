"""Application configuration."""
from collections import Counter
from functools import lru_cache
import math

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

WEAK_SECRET_VALUES = {"changeme", "changeme-in-production", "secret", "password", "test"}


def _validate_signing_secret(name: str, value: str) -> str:
    if not value:
        raise ValueError(f"{name} must be set.")

    if len(value) < 32:
        raise ValueError(f"{name} must be at least 32 characters.")

    lowered = value.lower()
    if lowered in WEAK_SECRET_VALUES or "changeme" in lowered:
        raise ValueError(f"{name} must not be a placeholder value.")

    counts = Counter(value)
    entropy_per_char = -sum((count / len(value)) * math.log2(count / len(value)) for count in counts.values())
    estimated_entropy_bits = entropy_per_char * len(value)
    if estimated_entropy_bits < 100:
        raise ValueError(f"{name} entropy is too low; use a cryptographically random value.")

    return value


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Wall Masters"
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    frontend_url: str = "https://www.wall-masters.com"

    # Database
    database_url: str = "sqlite:///./data/wallmasters.db"

    # Auth
    jwt_secret: str
    jwt_refresh_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 30
    reset_token_expire_minutes: int = 60

    # Mail
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    mail_from: str = "Wall Masters <info@wall-masters.com>"
    admin_email: str = "info@wall-masters.com"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, value: str) -> str:
        """Fail closed if JWT_SECRET is weak or placeholder quality."""
        return _validate_signing_secret("JWT_SECRET", value)

    @field_validator("jwt_refresh_secret")
    @classmethod
    def validate_jwt_refresh_secret(cls, value: str) -> str:
        """Fail closed if JWT_REFRESH_SECRET is weak or placeholder quality."""
        return _validate_signing_secret("JWT_REFRESH_SECRET", value)

    @model_validator(mode="after")
    def validate_distinct_secrets(self) -> "Settings":
        """Access and refresh tokens must not share a signing key."""
        if self.jwt_secret == self.jwt_refresh_secret:
            raise ValueError("JWT_SECRET and JWT_REFRESH_SECRET must differ.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
