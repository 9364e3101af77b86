"""Application Configuration"""

from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    APP_NAME: str = "Data Masking Tool"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]
    API_PREFIX: str = "/api/v1/masking"

    # Rules
    APPLY_RULE_DEFAULTS: bool = True  # Active rule fills options the request left unset
    SEED_DEFAULT_RULES: bool = True

    # Masking
    MAX_BATCH_SIZE: int = 1000

    # Never honoured when ENVIRONMENT is production
    LOG_ORIGINAL_DATA: bool = False

    class Config:
        env_file = ".env"

    @property
    def log_original_data(self) -> bool:
        return self.LOG_ORIGINAL_DATA and self.ENVIRONMENT != "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
