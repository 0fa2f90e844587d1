from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import json
from pathlib import Path


DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]

# Shipped catalogs live next to the app package
DEFAULT_CATALOG_DIR = Path(__file__).resolve().parents[1] / "data"


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - can be JSON string or comma-separated string
    CORS_ORIGINS: str = '["http://localhost:3000", "http://localhost:5173"]'

    # Catalog location (defaults to app/data)
    CATALOG_DIR: Optional[str] = None

    # Depth classification: distinct touchpoints needed before a deep dive is suggested
    DEPTH_TOUCHPOINT_THRESHOLD: int = 6

    # Recommended set size that triggers the "too many modules" notice
    TOO_MANY_MODULES_THRESHOLD: int = 10

    model_config = SettingsConfigDict(
        # Load from backend/.env (relative to this file's parent's parent)
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore unknown environment variables (like VITE_*)
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.DEPTH_TOUCHPOINT_THRESHOLD < 1:
            raise RuntimeError(
                f"DEPTH_TOUCHPOINT_THRESHOLD must be at least 1 (got {self.DEPTH_TOUCHPOINT_THRESHOLD})"
            )
        if self.TOO_MANY_MODULES_THRESHOLD < 1:
            raise RuntimeError(
                f"TOO_MANY_MODULES_THRESHOLD must be at least 1 (got {self.TOO_MANY_MODULES_THRESHOLD})"
            )
        if self.CATALOG_DIR and not Path(self.CATALOG_DIR).is_dir():
            raise RuntimeError(
                f"CATALOG_DIR points to {self.CATALOG_DIR!r}, which is not a directory"
            )

    @property
    def catalog_dir(self) -> Path:
        """Directory holding the touchpoint, module and industry JSON catalogs."""
        if self.CATALOG_DIR:
            return Path(self.CATALOG_DIR)
        return DEFAULT_CATALOG_DIR

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from JSON string or comma-separated string."""
        if not self.CORS_ORIGINS:
            return list(DEFAULT_CORS_ORIGINS)

        try:
            # Try parsing as JSON first
            parsed = json.loads(self.CORS_ORIGINS)
            if isinstance(parsed, list):
                return [str(origin) for origin in parsed]
            # If it's a string, treat as single origin
            return [str(parsed)]
        except (json.JSONDecodeError, TypeError):
            # Fall back to comma-separated string
            origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
            return origins if origins else list(DEFAULT_CORS_ORIGINS)


settings = Settings()
