from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    google_api_key: SecretStr | None = None
    llm_model: str = "gemini-2.0-flash"
    temperature: float = 0.7
    max_pages: int = 9
    question_count: int = 5
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process"""
    return Settings()
