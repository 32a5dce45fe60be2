"""
config.py — taxengine settings.

Usage:
    from taxengine.config import settings
    print(settings.default_financial_year)

Never use FastAPI Depends() for settings — import directly as a module-level singleton.
"""
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGED_RATE_TABLE_DIR = Path(__file__).parent / "rate_tables" / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore any extra env vars
    )

    # --- Rate tables ---
    # One JSON artifact per financial year: <rate_table_dir>/FY2025-26.json
    default_financial_year: str = "FY2025-26"
    # Unset → the tables shipped inside the package
    rate_table_dir: Optional[Path] = None

    # --- CORS ---
    # Comma-separated list of allowed frontend origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # --- Application ---
    debug: bool = False
    app_version: str = "0.1.0"

    @property
    def rate_table_path(self) -> Path:
        return self.rate_table_dir or PACKAGED_RATE_TABLE_DIR

    @property
    def cors_origins_list(self) -> List[str]:
        """Split comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Module-level singleton — import this throughout the codebase
settings = Settings()
