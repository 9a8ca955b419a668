from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List
import os


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can come from:
    - docker-compose.yml environment section
    - .env file (for secrets like SECRET_KEY)
    - System environment

    Variable names match docker-compose conventions:
    - POSTGRES_HOST, POSTGRES_PORT, etc. (for database)
    - REDIS_URL (for entity locks, optional)
    - ADMIN_USERNAMES (seed for the admin role table)
    """

    # Environment
    environment: str = "development"

    # JWT - uses SECRET_KEY from .env or generates default
    jwt_secret_key: str = Field(default="dev-secret-key-change-in-production", validate_default=True)
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # PostgreSQL (from docker-compose)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "fritter_user"
    postgres_password: str = "fritter_pass"
    postgres_db: str = "fritter"

    # Redis - empty string keeps entity locks in-process
    redis_url: str = ""

    # Trust workflow
    admin_usernames: str = "lola"

    # Entity locks
    lock_timeout_seconds: float = 10.0

    # Recommendations (0 = unlimited)
    recommendation_limit: int = Field(default=0, ge=0)

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra env vars

    @field_validator('jwt_secret_key', mode='before')
    @classmethod
    def get_jwt_secret(cls, v):
        """Use SECRET_KEY from env if JWT_SECRET_KEY not set"""
        if v and v != "dev-secret-key-change-in-production":
            return v
        # Fall back to SECRET_KEY (used in .env)
        return os.getenv('SECRET_KEY', v or 'dev-secret-key-change-in-production')

    @property
    def admin_username_list(self) -> List[str]:
        """Admin usernames as a normalized list"""
        return [
            name.strip().lower()
            for name in self.admin_usernames.split(',')
            if name.strip()
        ]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
