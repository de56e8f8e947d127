"""Application settings loaded from environment variables or .env."""

import secrets
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -------------------------
    # Database
    # -------------------------
    DATABASE_URL: str = "sqlite:///./ecat_quiz.db"
    # echo=False to avoid noisy logs; toggle for debugging
    SQL_ECHO: bool = False
    STORE_BACKEND: Literal["sql", "memory"] = "sql"

    # -------------------------
    # Application
    # -------------------------
    PROJECT_NAME: str = "ECAT Quiz"
    SEED_TEST_DATA: bool = True
    SECRET_KEY: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
