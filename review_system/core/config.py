from pathlib import Path
import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = "local"
    DATABASE_URL: str = "sqlite:///./review_system.db"
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all

    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    LOG_LEVEL: str = "INFO"

    # "legacy" answers with plain "Error: ..." strings and folds 404/409 into 400
    ERROR_RESPONSE_STYLE: Literal["structured", "legacy"] = "structured"

    # Organization/department writes are open to every authenticated user unless set
    RESTRICT_STRUCTURE_MUTATIONS: bool = False

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

settings = Settings()
