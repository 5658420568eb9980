from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGE_RATE_API_KEY, EXCHANGE_RATE_API_URL, RATES_CACHE_TTL_SECONDS, ADMIN_TOKEN).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Basic app metadata
    app_name: str = "Travel Desk Currency Service"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rates / caching
    # Unset or blank key -> fallback-only mode, no outbound calls.
    exchange_rate_api_key: Optional[str] = None
    exchange_rate_api_url: AnyHttpUrl = "https://open.exchangeratesapi.io/v1/latest"  # type: ignore[assignment]
    rates_cache_ttl_seconds: int = 24 * 60 * 60
    http_timeout_seconds: float = 5.0
    http_retries: int = 0

    # Guards POST /currency/refresh; unset disables the route.
    admin_token: Optional[str] = None

    @field_validator("exchange_rate_api_key", "admin_token")
    def blank_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("rates_cache_ttl_seconds")
    def positive_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")
        return v

    @field_validator("http_timeout_seconds")
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        return v

    @field_validator("http_retries")
    def non_negative_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_retries cannot be negative")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
