"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DELIVERY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Marketplace Delivery Engine"
    api_prefix: str = "/api"
    default_delivery_radius_km: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="Platform-wide delivery radius used when a vendor declares none. Unset means unbounded.",
    )
    currency_symbol: str = Field(default="₹", description="Prefix used when rendering money amounts.")
    distance_display_decimals: int = Field(default=1, ge=0, le=6)
    order_location_policy: Literal["all_vendors", "first_vendor"] = Field(
        default="all_vendors",
        description="Which vendors a delivery point is checked against when an order spans several vendors.",
    )
    marketplace_api_base_url: Optional[str] = Field(
        default=None,
        description="Root URL of the marketplace API (e.g., https://example.com/api/).",
    )
    marketplace_api_token: Optional[str] = Field(
        default=None,
        description="Token sent as 'Authorization: Token <value>' when set.",
    )
    api_timeout_seconds: float = Field(default=10.0, gt=0.0)
    api_max_retries: int = Field(default=3, ge=0)
    api_backoff_seconds: float = Field(default=0.5, ge=0.0)
    vendor_cache_ttl_seconds: float = Field(default=300.0, ge=0.0)
    vendor_cache_max_entries: int = Field(default=1000, ge=1)
    log_level: str = "INFO"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "capacitor://localhost",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("marketplace_api_base_url", mode="before")
    @classmethod
    def _ensure_trailing_slash(cls, value: Any) -> Any:
        # Relative endpoint paths are joined onto this root.
        if isinstance(value, str) and value.strip():
            stripped = value.strip()
            return stripped if stripped.endswith("/") else f"{stripped}/"
        return None if value == "" else value


settings = Settings()
