"""Service configuration read from ``SMART_DOCS_*`` environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DEMO_URL = (
    "https://raw.githubusercontent.com/kcwilliamson/smart-docs-worker/main/examples/"
    "cloudflare-docs-demo.html"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SMART_DOCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    personalization_policy: Literal["visible", "silent"] = Field(
        default="visible",
        description="'visible' exposes detection via meta tags and badges; 'silent' only hides sections",
    )

    # Demo page source
    demo_url: str = Field(default=DEFAULT_DEMO_URL, description="Remote HTML personalized on /demo")
    fetch_timeout: float = Field(default=10.0, gt=0, description="Demo fetch timeout in seconds")
    max_demo_size: int = Field(default=2 * 1024 * 1024, gt=0, description="Largest demo body accepted, in bytes")
    demo_rate_limit_enabled: bool = Field(default=False, description="Rate limit the demo routes")
    demo_rate_limit: str = Field(default="30/minute", description="slowapi limit applied when enabled")

    # Geolocation headers added by the edge platform
    country_header: str = Field(default="cf-ipcountry")
    city_header: str = Field(default="cf-ipcity")

    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings()
