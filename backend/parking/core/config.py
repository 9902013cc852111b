"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _default_rates() -> dict[str, dict[str, int]]:
    # minor units (pence)
    return {
        "summer": {"weekday": 1500, "weekend": 2000},
        "winter": {"weekday": 1200, "weekend": 1600},
    }


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Parking Reservations API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")
    lock_timeout_ms: int = Field(5000, ge=1, alias="DB_LOCK_TIMEOUT_MS")
    write_retry_attempts: int = Field(3, ge=1, alias="WRITE_RETRY_ATTEMPTS")
    write_retry_backoff_ms: int = Field(50, ge=0, alias="WRITE_RETRY_BACKOFF_MS")

    calendar_timezone: str = Field("UTC", alias="CALENDAR_TIMEZONE")
    default_capacity: int = Field(10, ge=0, alias="PARKING_DEFAULT_CAPACITY")
    max_stay_days: int = Field(10, ge=1, alias="PARKING_MAX_STAY_DAYS")
    reference_prefix: str = Field("BK-", alias="BOOKING_REFERENCE_PREFIX")
    quote_horizon_days: int = Field(365, ge=1, alias="BOOKING_QUOTE_HORIZON_DAYS")

    pricing_currency: str = Field("GBP", alias="PRICING_CURRENCY")
    pricing_rates: dict[str, dict[str, int]] = Field(
        default_factory=_default_rates, alias="PRICING_RATES"
    )
    summer_months: Annotated[list[int], NoDecode] = Field(
        default_factory=lambda: [6, 7, 8], alias="PRICING_SUMMER_MONTHS"
    )
    winter_months: Annotated[list[int], NoDecode] = Field(
        default_factory=lambda: [12, 1, 2], alias="PRICING_WINTER_MONTHS"
    )
    default_season: str = Field("winter", alias="PRICING_DEFAULT_SEASON")
    # 0=Sun ... 6=Sat
    weekend_days: Annotated[list[int], NoDecode] = Field(
        default_factory=lambda: [6, 0], alias="BOOKING_WEEKEND_DAYS"
    )

    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_default: str = Field("60/minute", alias="RATE_LIMIT_DEFAULT")

    cors_allowlist: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
    )

    @field_validator("cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("summer_months", "winter_months", "weekend_days", mode="before")
    @classmethod
    def _split_ints(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [int(part) for part in value.split(",") if part.strip()]
        return value

    @field_validator("pricing_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def calendar(self) -> ZoneInfo:
        """Timezone in which calendar days are evaluated."""
        return ZoneInfo(self.calendar_timezone)


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
