"""Voyage CMS - Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Database ──
    database_url: str = ""

    # ── Auth ──
    jwt_secret: str = "voyage-dev-secret-change-me-in-production"
    jwt_algorithm: str = "HS256"

    # ── Asset Store (Cloudinary) ──
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = "voyage"
    asset_store_timeout: float = 120.0  # seconds, per store call

    # ── Upload limits ──
    max_image_bytes: int = 200 * 1024 * 1024
    max_video_bytes: int = 1024 * 1024 * 1024

    # ── App ──
    log_level: str = "INFO"
    environment: str = "production"  # development exposes error details
    cors_origins: List[str] = ["*"]

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/voyage.db"
        return "sqlite:///./voyage.db"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
