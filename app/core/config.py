from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "staging", "test"]


def _resolve_env_files() -> tuple[str, ...]:
    env = os.getenv("AKUSTIK_ENVIRONMENT", "development").lower()
    if env in {"prod", "production"}:
        return (".env", ".env.prod")
    if env in {"dev", "development"}:
        return (".env", ".env.dev")
    if env in {"test", "testing"}:
        return (".env", ".env.test")
    return (".env",)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AKUSTIK_",
        env_file=_resolve_env_files(),
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Environment = "development"
    project_name: str = "Akustik Produkt Promo API"
    api_v1_prefix: str = "/api/v1"
    app_version: str = "1.0.0"
    log_level: str = "INFO"
    log_json: bool = False
    rate_limit: str = "60/minute"
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = []
    enable_docs: bool = True

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    generation_timeout_seconds: float = 30.0
    generation_max_output_tokens: int = 800

    database_url: str | None = None
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "akustik"

    @property
    def async_database_uri(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            "postgresql+asyncpg://"
            f"{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
