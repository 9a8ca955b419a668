"""
Role Repository - PostgreSQL storage for administrative roles

Storage: PostgreSQL (user_roles table)
"""
import logging
from typing import Iterable, List

import asyncpg

from models.domain.user import normalize_username

logger = logging.getLogger(__name__)


class RoleRepository:
    """Role grants keyed by lowercased username."""

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    async def has_role(self, username: str, role: str) -> bool:
        async with self.db_pool.acquire() as conn:
            found = await conn.fetchval("""
                SELECT 1 FROM user_roles
                WHERE username_key = $1 AND role = $2
            """, normalize_username(username), role)
            return found is not None

    async def list_holders(self, role: str) -> List[str]:
        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch("""
                SELECT username_key FROM user_roles
                WHERE role = $1
                ORDER BY username_key
            """, role)
            return [row['username_key'] for row in rows]

    async def grant(self, usernames: Iterable[str], role: str) -> None:
        """Grant a role to each username (existing grants are kept)."""
        keys = [normalize_username(u) for u in usernames if normalize_username(u)]
        if not keys:
            return

        async with self.db_pool.acquire() as conn:
            await conn.executemany("""
                INSERT INTO user_roles (username_key, role, granted_at)
                VALUES ($1, $2, NOW())
                ON CONFLICT (username_key, role) DO NOTHING
            """, [(key, role) for key in keys])

        logger.info(f"Granted role {role} to {', '.join(keys)}")

    async def revoke(self, username: str, role: str) -> bool:
        async with self.db_pool.acquire() as conn:
            result = await conn.execute("""
                DELETE FROM user_roles
                WHERE username_key = $1 AND role = $2
            """, normalize_username(username), role)

            rows_deleted = int(result.split()[-1])
            if rows_deleted > 0:
                logger.info(f"Revoked role {role} from {username}")
                return True
            return False
