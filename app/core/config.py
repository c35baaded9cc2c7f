# app/core/config.py
from __future__ import annotations
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Blockgate"
    app_version: str = "0.1.0"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 8888

    # Upstream router (nginx / gateway) puts the caller address here
    client_ip_header: str = "X-Real-Ip"

    # Seconds allowed for fetching a remote blacklist
    remote_timeout: float = 10.0
    # Optional source loaded once at startup
    seed_url: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
