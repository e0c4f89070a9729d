from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Semantic version reported by the service
    APP_VERSION: str = "1.0.0"
    # Historical work logs used to train the classifier at startup (.csv or .json)
    WORK_LOG_PATH: str = "data/work_logs.csv"
    # Probability used in place of a missing or zero category prior
    PRIOR_FLOOR: float = 0.001
    # Seed for technician selection; None draws from system entropy
    TECHNICIAN_SEED: Optional[int] = None
    # Validation split ratio for offline evaluation
    VALIDATION_SPLIT: float = 0.2
    # Random seed for dataset generation and evaluation splits
    RANDOM_SEED: int = 42
    # Request limits
    MAX_BODY_BYTES: int = 256 * 1024
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SEC: int = 60

    class Config:
        env_file = ".env"
        case_sensitive = True

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
