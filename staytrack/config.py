"""Application configuration from environment."""
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

# Load .env from project root (parent of staytrack/) so env vars are available everywhere
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


class Settings(BaseSettings):
    app_name: str = "StayTrack"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    database_url: str = "sqlite:///./staytrack.db"

    # Used when a traveler has no nationality on file
    default_nationality: str = "KR"

    @field_validator("default_nationality")
    @classmethod
    def upper_nationality(cls, v: str) -> str:
        return (v or "").strip().upper()

    compliance_check_enabled: bool = True
    compliance_check_hour: int = 9

    class Config:
        env_file = str(_env_path)
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
