"""Application configuration via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production-qtmap-settings"


class Settings(BaseSettings):
    """Environment-based configuration. Validated at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    APP_NAME: str = Field(default="qtmap-settings", description="Service name for logs and headers")
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    DEBUG: bool = Field(default=False, description="Enable debug mode")

    HOST: str = Field(default="0.0.0.0", description="Bind address; 0.0.0.0 for containers")
    PORT: int = Field(default=3001, ge=1, le=65535)

    SECRET_KEY: str = Field(default=DEFAULT_SECRET_KEY, min_length=32, description="Token signing secret")
    JWT_ALGORITHM: str = Field(default="HS256")
    JWT_ACCESS_EXPIRE_MINUTES: int = Field(default=24 * 60, ge=1, description="Access token lifetime")

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./qtmap.db",
        description="Async SQLAlchemy URL for the account and settings store",
    )
    DATABASE_ECHO: bool = Field(default=False, description="Log emitted SQL")
    STORE_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0, le=60.0)

    CORS_ORIGINS: str = Field(default="*", description="Comma-separated origins or *")

    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=False, description="JSON logs for cloud aggregators")
    SLOW_REQUEST_MS: float = Field(default=500.0, ge=0, description="Requests slower than this are logged")

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if "+" not in v.split("://", 1)[0]:
            raise ValueError("DATABASE_URL must name an async driver, e.g. sqlite+aiosqlite://")
        return v

    @model_validator(mode="after")
    def require_real_secret_in_production(self) -> "Settings":
        if self.is_production and self.SECRET_KEY == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be provided from the secret store in production")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance. Use for DI; avoids re-reading env on every request."""
    return Settings()
