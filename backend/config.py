"""
config.py
=========
Runtime configuration read from environment variables (a project-root .env
is loaded by main.py before this module is consulted).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


def _clean_env(name: str, default: str = "") -> str:
    value = os.getenv(name, default)
    return value.strip().strip('"').strip("'")


def _safe_int(value: str, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    model_url: str = ""
    model_cache_dir: str = "./model_cache"
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 60
    environment: str = "development"
    storage_backend: str = "mongo"      # mongo | memory
    database_url: str = "mongodb://localhost:27017"
    database_name: str = "character_practice"
    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def token_ttl_seconds(self) -> int:
        return self.jwt_expiration_minutes * 60

    @classmethod
    def from_env(cls) -> "Settings":
        settings = cls(
            model_url              = _clean_env("MODEL_URL"),
            model_cache_dir        = _clean_env("MODEL_CACHE_DIR", "./model_cache"),
            jwt_secret_key         = _clean_env("JWT_SECRET_KEY", "change-me"),
            jwt_expiration_minutes = _safe_int(_clean_env("JWT_EXPIRATION_MINUTES"), 60),
            environment            = (_clean_env("APP_ENV") or _clean_env("NODE_ENV") or "development").lower(),
            storage_backend        = _clean_env("STORAGE_BACKEND", "mongo").lower(),
            database_url           = _clean_env("DATABASE_URL", "mongodb://localhost:27017"),
            database_name          = _clean_env("DATABASE_NAME", "character_practice"),
        )
        frontend = _clean_env("FRONTEND_URL")
        if frontend:
            settings.cors_origins.append(frontend)
        return settings
