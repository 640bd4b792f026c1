"""
garage_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, bootstrap admin password).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    """
    Env-driven configuration (`GARAGE_*`).
    Defaults are safe for local development only; production must override the
    signing secret.
    """

    model_config = SettingsConfigDict(env_prefix="GARAGE_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "garage-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:3001"]
    )

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "garage-api"
    jwt_audience: str = "garage-clients"
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET, repr=False)
    jwt_expire_hours: int = Field(default=24, ge=1)

    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = Field(default=None, repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./garage.db"
    # Deadline applied to each service operation so a slow store cannot stall a request.
    store_timeout_seconds: float = Field(default=5.0, gt=0)

    # Cache (optional); empty url disables it.
    redis_url: str | None = None
    cache_ttl_seconds: int = 300
    cache_list_ttl_seconds: int = 60


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Database connection string, cache url, signing secret, token lifetime and
# listening port are the only values operators normally need to set.
