"""Application settings loaded from environment variables.

The Settings object is built once at startup and handed to the components
that need it. Nothing reads the environment after that.
"""

import os
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

DEV_JWT_SECRET = "taskboard-dev-secret-change-me"

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
]


class Settings(BaseModel):
    """Process-wide configuration.

    Environment variables:
        TASKBOARD_ENV: development / production / test
        TASKBOARD_DB_PATH: SQLite database file
        TASKBOARD_JWT_SECRET: token signing secret (required in production)
        TASKBOARD_JWT_EXPIRES_IN: token lifetime in seconds
        TASKBOARD_ALLOWED_ORIGINS: comma separated CORS origins
        FRONTEND_URL: extra CORS origin
        TASKBOARD_RATE_LIMIT_WINDOW_S / TASKBOARD_RATE_LIMIT_MAX: rate limit window
        TASKBOARD_LOG_FORMAT / TASKBOARD_LOG_LEVEL: logging
        TASKBOARD_HOST / TASKBOARD_PORT: bind address for `taskboard serve`
    """

    environment: Literal["development", "production", "test"] = "development"
    db_path: Path = Path("data") / "taskboard.db"
    jwt_secret: SecretStr = SecretStr(DEV_JWT_SECRET)
    jwt_algorithm: str = "HS256"
    jwt_expires_in_s: int = Field(default=7 * 24 * 3600, ge=1)
    allowed_origins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS)
    )
    rate_limit_window_s: int = Field(default=15 * 60, ge=1)
    rate_limit_max: int = Field(default=100, ge=1)
    log_format: Literal["dev", "json"] = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def expose_errors(self) -> bool:
        """Whether 500 responses may carry the underlying error message."""
        return self.environment == "development"


def _env_int(name: str, default: int) -> int | None:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        return int(val)
    except ValueError:
        log.warning("invalid_int_config", env_var=name, value=val, fallback=default)
        return None


def load_settings() -> Settings:
    """Build Settings from the environment.

    Raises:
        ValueError: production environment without a real signing secret.
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKBOARD_ENV"):
        kwargs["environment"] = val

    if val := os.environ.get("TASKBOARD_DB_PATH"):
        kwargs["db_path"] = Path(val)

    if val := os.environ.get("TASKBOARD_JWT_SECRET"):
        kwargs["jwt_secret"] = SecretStr(val)

    origins = list(DEFAULT_ALLOWED_ORIGINS)
    if val := os.environ.get("TASKBOARD_ALLOWED_ORIGINS"):
        origins = [o.strip() for o in val.split(",") if o.strip()]
    if val := os.environ.get("FRONTEND_URL"):
        origins.append(val.strip())
    kwargs["allowed_origins"] = origins

    int_fields = {
        "TASKBOARD_JWT_EXPIRES_IN": "jwt_expires_in_s",
        "TASKBOARD_RATE_LIMIT_WINDOW_S": "rate_limit_window_s",
        "TASKBOARD_RATE_LIMIT_MAX": "rate_limit_max",
        "TASKBOARD_PORT": "port",
    }
    for env_var, field in int_fields.items():
        parsed = _env_int(env_var, Settings.model_fields[field].default)
        if parsed is not None:
            kwargs[field] = parsed

    if val := os.environ.get("TASKBOARD_LOG_FORMAT"):
        kwargs["log_format"] = val

    if val := os.environ.get("TASKBOARD_LOG_LEVEL"):
        kwargs["log_level"] = val

    if val := os.environ.get("TASKBOARD_HOST"):
        kwargs["host"] = val

    settings = Settings(**kwargs)

    if settings.is_production and (
        settings.jwt_secret.get_secret_value() == DEV_JWT_SECRET
    ):
        raise ValueError("TASKBOARD_JWT_SECRET must be set in production")

    return settings
