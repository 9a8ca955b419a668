"""
Database Configuration
======================

Connection configuration for the API process.
Handles PostgreSQL and Redis connections from the application Settings, so
values from the environment and from .env are treated the same way.
"""
from typing import Optional
from dataclasses import dataclass

from .settings import Settings, get_settings


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""
    host: str
    port: int
    user: str
    password: str
    database: str
    min_size: int = 2
    max_size: int = 10

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        min_size: int = 2,
        max_size: int = 10,
    ) -> 'PostgresConfig':
        """Create config from application settings."""
        return cls(
            host=settings.postgres_host,
            port=settings.postgres_port,
            user=settings.postgres_user,
            password=settings.postgres_password,
            database=settings.postgres_db,
            min_size=min_size,
            max_size=max_size,
        )

    def to_asyncpg_kwargs(self) -> dict:
        """Convert to asyncpg.create_pool kwargs."""
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database,
            'min_size': self.min_size,
            'max_size': self.max_size,
        }


@dataclass
class RedisConfig:
    """Redis connection configuration."""
    url: str

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional['RedisConfig']:
        """Create config from application settings (None when redis_url is empty)."""
        url = settings.redis_url.strip()
        if not url:
            return None

        return cls(url=url)


def get_postgres_config(min_size: int = 2, max_size: int = 10) -> PostgresConfig:
    """Get PostgreSQL configuration from settings."""
    return PostgresConfig.from_settings(get_settings(), min_size=min_size, max_size=max_size)


def get_redis_config() -> Optional[RedisConfig]:
    """Get Redis configuration from settings."""
    return RedisConfig.from_settings(get_settings())


async def create_postgres_pool(min_size: int = 2, max_size: int = 10):
    """Create PostgreSQL connection pool from settings."""
    import asyncpg
    config = get_postgres_config(min_size=min_size, max_size=max_size)
    return await asyncpg.create_pool(**config.to_asyncpg_kwargs())


async def create_redis_client(config: Optional[RedisConfig] = None):
    """
    Create a Redis client.

    Args:
        config: Connection config; defaults to the one built from settings

    Returns None when redis_url is empty; entity locks then stay in-process.
    """
    import redis.asyncio as redis
    if config is None:
        config = get_redis_config()
    if config is None:
        return None
    return await redis.from_url(config.url, decode_responses=True)
