"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./rsvp.db"
    EVENT_CREATION_PASSWORD: str = "neo-tokyo"
    CORS_ORIGINS: str = "http://localhost:5173"
    DISPLAY_TIMEZONE: str = "UTC"  # IANA tz used for RSVP dates
    SEED_SAMPLE_EVENT: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
