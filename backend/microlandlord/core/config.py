# Central place for all configurable settings. We use Pydantic's
# BaseSettings so values can be read from env vars or a .env file.

import json

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
        extra="ignore",
    )

    APP_NAME: str = "Micro-Landlord OS"

    # Core DB connection string, like sqlite:///./landlord.db or a Postgres URL.
    DATABASE_URL: str = "sqlite:///./landlord.db"

    # Toggle SQLAlchemy echo logs. Useful for debugging queries locally.
    DB_ECHO: bool = False

    # Root level for the JSON loggers.
    LOG_LEVEL: str = "INFO"

    # Header carrying the authenticated account id. Authentication itself
    # happens upstream at the identity provider.
    ACCOUNT_HEADER_NAME: str = "X-Account-ID"

    # Length of a freshly opened billing period. Periods are flat windows,
    # never aligned to calendar months.
    SUBSCRIPTION_PERIOD_DAYS: int = Field(default=30, gt=0)

    # Startup behaviour. Tests and migration-managed deployments skip
    # create_all; seeding writes the static catalog into the plans table.
    SKIP_CREATE_ALL: bool = False
    SEED_PLANS_ON_STARTUP: bool = True

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value


# Any module can just `from microlandlord.core.config import settings`.
settings = Settings()
