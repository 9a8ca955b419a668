"""
User Repository - PostgreSQL storage for user accounts and the follow graph

Storage: PostgreSQL (users table)

Graph edges are written with array_append guarded by a membership test and
removed by filtering the list, so every statement is an idempotent set
operation on one row. Username membership ignores case, as User does. The
two projections of an edge are written in one transaction.
"""
import logging
from typing import Dict, Iterable, List, Optional

import asyncpg

from models.domain.user import User, normalize_username

logger = logging.getLogger(__name__)


USER_COLUMNS = """
    user_id, username, interests, following, followers, verified, created_at
"""


def _has_name(column: str, param: str) -> str:
    """SQL test: column (a username array) contains param, ignoring case."""
    return f"EXISTS (SELECT 1 FROM unnest({column}) AS name WHERE lower(name) = lower({param}))"


def _without_name(column: str, param: str) -> str:
    """SQL expression: column with every case variant of param removed, order kept."""
    return f"""ARRAY(
        SELECT name FROM unnest({column}) WITH ORDINALITY AS t(name, pos)
        WHERE lower(name) <> lower({param})
        ORDER BY pos
    )"""


def _row_to_user(row) -> User:
    return User(
        user_id=row['user_id'],
        username=row['username'],
        interests=list(row['interests'] or []),
        following=list(row['following'] or []),
        followers=list(row['followers'] or []),
        verified=bool(row['verified']),
        created_at=row['created_at'],
    )


class UserRepository:
    """
    Repository for User domain model

    Handles user lookup, interests and the following/followers projections.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Retrieve user by ID.

        Args:
            user_id: User ID (us_xxxxxxxx)

        Returns:
            User model or None
        """
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE user_id = $1
            """, user_id)

            return _row_to_user(row) if row else None

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Retrieve user by username (case-insensitive).

        Args:
            username: Username in any case

        Returns:
            User model or None
        """
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE lower(username) = $1
            """, normalize_username(username))

            return _row_to_user(row) if row else None

    async def get_many_by_ids(self, user_ids: Iterable[str]) -> Dict[str, User]:
        """
        Retrieve several users in one query.

        Returns:
            Mapping of user_id to User (missing IDs are absent)
        """
        ids = list(set(user_ids))
        if not ids:
            return {}

        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE user_id = ANY($1::text[])
            """, ids)

            return {row['user_id']: _row_to_user(row) for row in rows}

    async def list_verified(self) -> List[User]:
        """List users currently holding the VSP role, by username."""
        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE verified = true
                ORDER BY lower(username)
            """)

            return [_row_to_user(row) for row in rows]

    # =========================================================================
    # CREATE / DELETE
    # =========================================================================

    async def create(self, user: User) -> User:
        """
        Create a new user.

        Args:
            user: User model (id generated in __post_init__ if not set)

        Returns:
            Created user with timestamp
        """
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow("""
                INSERT INTO users (
                    user_id, username, interests, following, followers,
                    verified, created_at
                )
                VALUES ($1, $2, $3, $4, $5, $6, NOW())
                RETURNING created_at
            """,
                user.user_id,
                user.username.strip(),
                user.interests,
                user.following,
                user.followers,
                user.verified
            )

            user.created_at = row['created_at']

            logger.info(f"Created user {user.user_id} ({user.username})")
            return user

    async def delete(self, user: User) -> bool:
        """
        Delete a user and detach it from every other user's graph lists.

        The graph cleanup, role cleanup, request removal and row delete run
        in one transaction.

        Returns:
            True if the user row was deleted
        """
        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(f"""
                    UPDATE users
                    SET following = {_without_name('following', '$1')},
                        followers = {_without_name('followers', '$1')}
                    WHERE {_has_name('following', '$1')} OR {_has_name('followers', '$1')}
                """, user.username)

                await conn.execute("""
                    DELETE FROM vsp_requests WHERE username_key = $1
                """, user.key)

                await conn.execute("""
                    DELETE FROM user_roles WHERE username_key = $1
                """, user.key)

                result = await conn.execute("""
                    DELETE FROM users WHERE user_id = $1
                """, user.user_id)

            rows_deleted = int(result.split()[-1])
            if rows_deleted > 0:
                logger.info(f"Deleted user {user.user_id} ({user.username})")
                return True
            return False

    # =========================================================================
    # INTERESTS
    # =========================================================================

    async def add_interest(self, user_id: str, keyword: str) -> Optional[User]:
        """Append keyword to interests if absent; returns the updated user."""
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                UPDATE users
                SET interests = CASE
                    WHEN $2 = ANY(interests) THEN interests
                    ELSE array_append(interests, $2)
                END
                WHERE user_id = $1
                RETURNING {USER_COLUMNS}
            """, user_id, keyword)

            return _row_to_user(row) if row else None

    async def remove_interest(self, user_id: str, keyword: str) -> Optional[User]:
        """Remove keyword from interests; returns the updated user."""
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                UPDATE users
                SET interests = array_remove(interests, $2)
                WHERE user_id = $1
                RETURNING {USER_COLUMNS}
            """, user_id, keyword)

            return _row_to_user(row) if row else None

    # =========================================================================
    # GRAPH EDGES
    # =========================================================================

    async def add_edge(self, follower: User, followee: User) -> User:
        """
        Record follower -> followee on both documents atomically.

        Args:
            follower: User who follows
            followee: User being followed

        Returns:
            Updated follower
        """
        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(f"""
                    UPDATE users
                    SET following = CASE
                        WHEN {_has_name('following', '$2')} THEN following
                        ELSE array_append(following, $2)
                    END
                    WHERE user_id = $1
                    RETURNING {USER_COLUMNS}
                """, follower.user_id, followee.username)

                await conn.execute(f"""
                    UPDATE users
                    SET followers = CASE
                        WHEN {_has_name('followers', '$2')} THEN followers
                        ELSE array_append(followers, $2)
                    END
                    WHERE user_id = $1
                """, followee.user_id, follower.username)

            logger.info(f"Edge added: {follower.username} -> {followee.username}")
            return _row_to_user(row)

    async def remove_edge(self, follower: User, followee: User) -> User:
        """
        Remove follower -> followee from both documents atomically.

        Returns:
            Updated follower
        """
        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(f"""
                    UPDATE users
                    SET following = {_without_name('following', '$2')}
                    WHERE user_id = $1
                    RETURNING {USER_COLUMNS}
                """, follower.user_id, followee.username)

                await conn.execute(f"""
                    UPDATE users
                    SET followers = {_without_name('followers', '$2')}
                    WHERE user_id = $1
                """, followee.user_id, follower.username)

            logger.info(f"Edge removed: {follower.username} -> {followee.username}")
            return _row_to_user(row)
