# app/config.py
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App
    APP_ENV: Literal["dev", "prod", "staging"] = "dev"
    TZ: str = "UTC"
    PORT: int = 8080

    # SerpApi (Google Flights engine)
    SERPAPI_API_KEY: str = ""
    SERPAPI_BASE_URL: str = "https://serpapi.com/search"
    SERPAPI_ENGINE: str = "google_flights"
    SERPAPI_TIMEOUT_SECONDS: float = 30.0

    # Search
    SEARCH_CURRENCY: str = "USD"

    # read .env and ignore any extra keys
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
