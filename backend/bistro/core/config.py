"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Annotated, Any, Literal

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Bistro Nouveau Reservations API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")
    rate_limit_login: str = Field("10/minute", alias="RATE_LIMIT_LOGIN")

    cors_allowlist: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    # Restaurant booking rules
    opening_hour: int = Field(17, alias="OPENING_HOUR")
    closing_hour: int = Field(22, alias="CLOSING_HOUR")
    time_slot_minutes: int = Field(30, alias="TIME_SLOT_MINUTES")
    overlap_threshold_minutes: int = Field(90, alias="OVERLAP_THRESHOLD_MINUTES")
    max_party_size: int = Field(12, alias="MAX_PARTY_SIZE")
    booking_horizon_days: int = Field(60, alias="BOOKING_HORIZON_DAYS")
    restaurant_timezone: str = Field("UTC", alias="RESTAURANT_TIMEZONE")
    occupancy_mode: Literal["headcount", "table_match"] = Field(
        "headcount", alias="OCCUPANCY_MODE"
    )
    serialize_bookings: bool = Field(default=False, alias="SERIALIZE_BOOKINGS")

    seed_sample_tables: bool = Field(default=True, alias="SEED_SAMPLE_TABLES")
    bootstrap_admin_email: str | None = Field(default=None, alias="BOOTSTRAP_ADMIN_EMAIL")
    bootstrap_admin_password: str | None = Field(
        default=None, alias="BOOTSTRAP_ADMIN_PASSWORD"
    )

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
