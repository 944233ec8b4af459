from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or a .env file.
    """

    APP_NAME: str = "Inventory Product API"
    APP_VERSION: str = "1.0.0"

    # Storage
    DATA_FILE: str = "data/products.json"
    STATIC_DIR: str = "public"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: list[str] = ["*"]

    # Business rules
    LOW_STOCK_THRESHOLD: int = 10

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_FILE)

    @property
    def sequence_path(self) -> Path:
        """Sidecar file holding the last issued product id."""
        path = self.data_path
        return path.with_name(f"{path.stem}.seq.json")


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
