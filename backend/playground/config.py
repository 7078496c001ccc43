from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from ``PLAYGROUND_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="PLAYGROUND_", env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./playground.db"
    # transport policy only; the executor itself never enforces a timeout
    request_timeout: Optional[float] = 30.0
    follow_redirects: bool = True
    verify_ssl: bool = True
    cors_origins: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    history_limit: int = 50
    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
