"""Environment configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file early to ensure environment variables are set
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    xlsx_dir: Path = Path("./xlsx_files")
    spreadsheet_extension: str = ".xlsx"
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    allowed_origins: str = "*"

    @field_validator("spreadsheet_extension")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        """Lowercase the extension and make sure it starts with a dot."""
        v = v.strip().lower()
        return v if v.startswith(".") else f".{v}"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse allowed origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
