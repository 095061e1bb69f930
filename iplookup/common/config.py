from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from iplookup import __version__


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="IPLOOKUP_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "IP Lookup API"
    debug: bool = False
    log_level: str = "INFO"

    # Provider (ipapi.co, same source the web client used)
    provider_url: str = "https://ipapi.co/{ip}/json/"
    provider_timeout: float = 5.0
    user_agent: str = f"iplookup/{__version__}"

    # CORS
    cors_origins: List[str] = ["*"]

    # uvicorn
    host: str = "0.0.0.0"
    port: int = 8080


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
