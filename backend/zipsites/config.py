"""ZipSites configuration — Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "ZipSites"
    debug: bool = True
    environment: str = "development"
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = ["*"]
    public_base_url: str = ""  # Overrides the request origin in site URLs

    # Storage paths (relative resolved from backend/ at runtime)
    data_dir: str = "./data"
    blob_dir: str = "./data/blobs"
    database_path: str = "./data/zipsites.db"

    # Upload limits
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MB
    max_object_bytes: int = 0  # 0 = no per-object quota
    allowed_upload_types: list[str] = [
        "application/zip",
        "application/x-zip-compressed",
        "multipart/x-zip",
    ]

    # Site identifiers
    site_id_length: int = 8
    site_id_attempts: int = 5

    # Serving
    cache_max_age_seconds: int = 3600

    # Orphan sweep (sites whose manifest was never written)
    sweep_interval_minutes: int = 60  # 0 disables the sweeper
    orphan_grace_minutes: int = 60

    # Server limits
    uvicorn_workers: int = 1
    max_db_connections: int = 5

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="ZIPSITES_",
        extra="ignore",
    )

    @field_validator("cors_origins", "allowed_upload_types", mode="before")
    @classmethod
    def split_comma_list(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Ensure data directories are absolute."""
        base = Path(__file__).resolve().parent.parent  # backend/
        for field in ("data_dir", "blob_dir", "database_path"):
            val = getattr(self, field)
            if not Path(val).is_absolute():
                setattr(self, field, str(base / val))
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
