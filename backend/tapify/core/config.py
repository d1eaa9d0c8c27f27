# Central place for all configurable settings. We use Pydantic's
# BaseSettings so values can be read from env vars or a .env file.

import json
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def safe_json_loads(value):
    try:
        return json.loads(value)
    except Exception:
        return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_json_loads=safe_json_loads,
    )

    # Core DB connection string, like sqlite:///./tapify.db or a Postgres URL.
    DATABASE_URL: str

    # Secret key used for signing access tokens.
    SECRET_KEY: str

    # JWT algorithm. Default HS256 (symmetric HMAC-SHA256).
    ALGORITHM: str = "HS256"

    # How long issued access tokens are valid, in minutes.
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Disbursement provider execution endpoint. Accepts {"payoutJobId": ...}
    # and owns the pending -> paid transition for that job.
    DISBURSEMENT_PROVIDER_URL: Optional[str] = None
    DISBURSEMENT_PROVIDER_TOKEN: Optional[str] = None

    # Upper bound on a single provider call. A call that runs past this
    # is reported as an unknown outcome, never retried automatically.
    PAYOUT_TRIGGER_TIMEOUT_SECONDS: float = Field(default=15.0, gt=0)
    PAYOUT_BATCH_MAX_WORKERS: int = Field(default=4, gt=0)

    # Ledger reads: how many recent orders to attach as context, and how
    # many independent fetches may run at once.
    LEDGER_ORDER_LIMIT: int = Field(default=1000, gt=0)
    LEDGER_FETCH_WORKERS: int = Field(default=4, gt=0)

    # Split shown for vendors whose commission has never been configured.
    DEFAULT_RETAILER_PERCENT: int = Field(default=20, ge=0, le=100)
    DEFAULT_SOURCER_PERCENT: int = Field(default=10, ge=0, le=100)
    DEFAULT_TAPIFY_PERCENT: int = Field(default=10, ge=0, le=100)

    LOG_LEVEL: str = "INFO"

    @field_validator("DISBURSEMENT_PROVIDER_URL", "DISBURSEMENT_PROVIDER_TOKEN", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value


# Instantiate a single settings object for app-wide import.
# Any module can just `from tapify.core.config import settings`.
settings = Settings()
