from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    data_dir: Path = Path("data")
    templates_dir: Path = PACKAGE_DIR / "templates"
    host: str = "0.0.0.0"
    port: int = 8081
    log_level: str = "INFO"
    # Titles accepted in /view/, /edit/, ... paths
    title_pattern: str = r"^[A-Za-zÄÖÜäöüß0-9\- ]+$"

    model_config = {
        "env_file": ".env",
        "env_prefix": "COOKBOOK_",
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
