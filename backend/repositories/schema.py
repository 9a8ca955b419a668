"""
PostgreSQL schema for the trust & social graph core

Applied idempotently at API startup via ensure_schema().

Usernames are unique case-insensitively; tables keyed by username use the
lowercased form (username_key) and keep the display form alongside.
"""
import logging

import asyncpg

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    user_id     TEXT PRIMARY KEY,
    username    TEXT NOT NULL,
    interests   TEXT[] NOT NULL DEFAULT '{}',
    following   TEXT[] NOT NULL DEFAULT '{}',
    followers   TEXT[] NOT NULL DEFAULT '{}',
    verified    BOOLEAN NOT NULL DEFAULT FALSE,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE UNIQUE INDEX IF NOT EXISTS users_username_key
    ON users (lower(username));

CREATE TABLE IF NOT EXISTS content (
    id          TEXT PRIMARY KEY,
    author_id   TEXT NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    body        TEXT NOT NULL,
    is_fact     BOOLEAN NOT NULL DEFAULT FALSE,
    endorsers   TEXT[] NOT NULL DEFAULT '{}',
    denouncers  TEXT[] NOT NULL DEFAULT '{}',
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS content_recent_idx
    ON content (updated_at DESC);

CREATE TABLE IF NOT EXISTS vsp_requests (
    username_key   TEXT PRIMARY KEY,
    username       TEXT NOT NULL,
    justification  TEXT NOT NULL,
    status         TEXT NOT NULL DEFAULT 'pending'
                   CHECK (status IN ('pending', 'granted', 'revoked')),
    requested_at   TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    decided_at     TIMESTAMPTZ,
    decided_by     TEXT
);

CREATE TABLE IF NOT EXISTS user_roles (
    username_key  TEXT NOT NULL,
    role          TEXT NOT NULL,
    granted_at    TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    PRIMARY KEY (username_key, role)
);
"""


async def ensure_schema(db_pool: asyncpg.Pool) -> None:
    """Create tables and indexes if they do not exist."""
    async with db_pool.acquire() as conn:
        await conn.execute(SCHEMA_SQL)
    logger.info("Schema ensured")
