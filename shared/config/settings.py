"""
Asset Tracker Settings
======================

Every tunable of the asset tracker, read from the environment (and an
optional ``.env`` file). Each concern has its own prefix:

    WARRANTY_API_URL, WARRANTY_TIMEOUT_SECONDS, WARRANTY_BATCH_SIZE,
    WARRANTY_DEFAULT_DURATION_MONTHS
    JWT_SECRET_KEY, JWT_ACCESS_TOKEN_EXPIRE_MINUTES, ...
    BOOTSTRAP_ADMIN_EMAIL, BOOTSTRAP_ADMIN_PASSWORD, BOOTSTRAP_ADMIN_FULL_NAME
    CORS_ORIGINS, CORS_ALLOW_CREDENTIALS
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEV_JWT_SECRET = "asset-tracker-development-secret-change-me"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class WarrantyServiceSettings(BaseSettings):
    """Where and how the remote warranty service is called."""

    model_config = SettingsConfigDict(env_prefix="WARRANTY_")

    api_url: str = "https://server1.eport.ws"
    timeout_seconds: float = Field(default=15.0, gt=0)

    # Concurrent status checks per chunk; chunks run one after another
    batch_size: int = Field(default=10, ge=1)
    default_duration_months: int = Field(default=12, ge=1)

    @property
    def base_url(self) -> str:
        return self.api_url.rstrip("/")


class JWTSettings(BaseSettings):
    """Session token signing."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    secret_key: SecretStr = SecretStr(DEV_JWT_SECRET)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=30, ge=1)
    refresh_token_expire_days: int = Field(default=7, ge=1)


class CORSSettings(BaseSettings):
    """Browser origins allowed to call the API."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    # Comma separated
    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class BootstrapSettings(BaseSettings):
    """
    First administrator.

    Sign-up only ever creates ``user`` profiles, so a fresh deployment needs
    one administrator seeded at startup to promote anybody else.
    """

    model_config = SettingsConfigDict(env_prefix="BOOTSTRAP_")

    admin_email: str = ""
    admin_password: SecretStr = SecretStr("")
    admin_full_name: str = "Administrator"

    @property
    def enabled(self) -> bool:
        return bool(self.admin_email and self.admin_password.get_secret_value())


class Settings(BaseSettings):
    """
    Root settings.

    Import the ``settings`` singleton from ``shared.config``; construct
    ``Settings()`` directly only to read a changed environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    service_name: str = "asset-tracker"
    port: int = Field(default=8010, alias="ASSET_TRACKER_PORT")

    warranty: WarrantyServiceSettings = Field(default_factory=WarrantyServiceSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @model_validator(mode="after")
    def require_real_secret_in_production(self) -> "Settings":
        """Refuse to start a production deployment on the development signing key."""
        if self.is_production and self.jwt.secret_key.get_secret_value() == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process."""
    return Settings()
