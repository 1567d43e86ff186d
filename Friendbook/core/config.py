from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "Friendbook Social API"
    VERSION: str = "0.1.0"

    # Credentials
    JWT_SECRET: str = "change-me-in-prod"
    JWT_EXPIRES_SECONDS: int = 3600
    PASSWORD_HASH_ITERATIONS: int = 120_000

    # Ranking
    TRENDING_DEFAULT_LIMIT: int = 10
    SUGGESTED_DEFAULT_LIMIT: int = 10
    MAX_LIST_LIMIT: int = 100

    # Startup
    SEED_DEMO_DATA: bool = True
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="FRIENDBOOK_", env_file=".env", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
