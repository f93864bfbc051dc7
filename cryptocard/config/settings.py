import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, field_validator


class Settings(BaseModel):
    CMC_API_KEY: str | None = None
    CMC_BASE_URL: str = "https://pro-api.coinmarketcap.com"
    CMC_API_VERSION: Literal["v1", "v2"] = "v1"
    CMC_CONVERT: str = "USD"
    CMC_LISTING_LIMIT: int = 20
    CMC_TIMEOUT_SEC: float = 5.0
    PROXY_BASE_URL: str = "http://127.0.0.1:8000"
    TOP_CRYPTO_COUNT: int = 10

    @field_validator("CMC_API_KEY")
    @classmethod
    def blank_key_is_missing(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("CMC_CONVERT")
    @classmethod
    def normalize_convert(cls, value: str) -> str:
        return value.upper()

    @field_validator("CMC_LISTING_LIMIT")
    @classmethod
    def check_listing_limit(cls, value: int) -> int:
        # provider accepts 1..5000 per page
        if not 1 <= value <= 5000:
            raise ValueError("CMC_LISTING_LIMIT must be between 1 and 5000")
        return value

    @field_validator("TOP_CRYPTO_COUNT")
    @classmethod
    def check_top_count(cls, value: int) -> int:
        if value < 1:
            raise ValueError("TOP_CRYPTO_COUNT must be positive")
        return value

    @field_validator("CMC_BASE_URL", "PROXY_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def api_key_configured(self) -> bool:
        return self.CMC_API_KEY is not None

    @classmethod
    def from_env(cls) -> "Settings":
        raw = {
            "CMC_API_KEY": os.getenv("COINMARKETCAP_API_KEY"),
            "CMC_BASE_URL": os.getenv("CMC_BASE_URL"),
            "CMC_API_VERSION": os.getenv("CMC_API_VERSION"),
            "CMC_CONVERT": os.getenv("CMC_CONVERT"),
            "CMC_LISTING_LIMIT": os.getenv("CMC_LISTING_LIMIT"),
            "CMC_TIMEOUT_SEC": os.getenv("CMC_TIMEOUT_SEC"),
            "PROXY_BASE_URL": os.getenv("CRYPTO_PROXY_BASE_URL"),
            "TOP_CRYPTO_COUNT": os.getenv("TOP_CRYPTO_COUNT"),
        }
        # unset env vars fall back to field defaults
        return cls.model_validate({k: v for k, v in raw.items() if v is not None})


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
