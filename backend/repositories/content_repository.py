"""
Content Repository - PostgreSQL storage for content items and their ledger

Storage: PostgreSQL (content table)

Ledger writes are single-statement idempotent set operations: inserting an
existing member or removing an absent one leaves the row unchanged.
"""
import logging
from typing import List, Optional

import asyncpg

from models.domain.content import Content

logger = logging.getLogger(__name__)


CONTENT_COLUMNS = """
    id, author_id, body, is_fact, endorsers, denouncers, created_at, updated_at
"""

# Ledger column names accepted by _add_member/_remove_member
LEDGER_COLUMNS = ('endorsers', 'denouncers')


def _row_to_content(row) -> Content:
    return Content(
        id=row['id'],
        author_id=row['author_id'],
        body=row['body'],
        is_fact=bool(row['is_fact']),
        endorsers=list(row['endorsers'] or []),
        denouncers=list(row['denouncers'] or []),
        created_at=row['created_at'],
        updated_at=row['updated_at'],
    )


class ContentRepository:
    """
    Repository for Content domain model

    Content authoring lives elsewhere; this repository reads items, stores
    new ones, and maintains the endorser/denouncer sets.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_id(self, content_id: str) -> Optional[Content]:
        """
        Retrieve content by ID.

        Args:
            content_id: Content ID (ct_xxxxxxxx)

        Returns:
            Content model or None
        """
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {CONTENT_COLUMNS}
                FROM content
                WHERE id = $1
            """, content_id)

            return _row_to_content(row) if row else None

    async def list_recent(self, exclude_author_ids: Optional[List[str]] = None) -> List[Content]:
        """
        All content, most recently modified first.

        Args:
            exclude_author_ids: Authors whose items are skipped in SQL

        Returns:
            List of content items
        """
        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {CONTENT_COLUMNS}
                FROM content
                WHERE NOT (author_id = ANY($1::text[]))
                ORDER BY updated_at DESC, created_at DESC
            """, exclude_author_ids or [])

            return [_row_to_content(row) for row in rows]

    # =========================================================================
    # CREATE OPERATION
    # =========================================================================

    async def create(self, content: Content) -> Content:
        """
        Store a new content item.

        Args:
            content: Content model (id generated if not set)

        Returns:
            Created content with timestamps
        """
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow("""
                INSERT INTO content (
                    id, author_id, body, is_fact, endorsers, denouncers,
                    created_at, updated_at
                )
                VALUES ($1, $2, $3, $4, '{}', '{}', NOW(), NOW())
                RETURNING created_at, updated_at
            """,
                content.id,
                content.author_id,
                content.body,
                content.is_fact
            )

            content.endorsers = []
            content.denouncers = []
            content.created_at = row['created_at']
            content.updated_at = row['updated_at']

            logger.info(f"Created content {content.id} by user {content.author_id}")
            return content

    # =========================================================================
    # LEDGER OPERATIONS
    # =========================================================================

    async def add_endorser(self, content_id: str, username: str) -> Optional[Content]:
        return await self._add_member(content_id, 'endorsers', username)

    async def remove_endorser(self, content_id: str, username: str) -> Optional[Content]:
        return await self._remove_member(content_id, 'endorsers', username)

    async def add_denouncer(self, content_id: str, username: str) -> Optional[Content]:
        return await self._add_member(content_id, 'denouncers', username)

    async def remove_denouncer(self, content_id: str, username: str) -> Optional[Content]:
        return await self._remove_member(content_id, 'denouncers', username)

    async def _add_member(self, content_id: str, column: str, username: str) -> Optional[Content]:
        if column not in LEDGER_COLUMNS:
            raise ValueError(f"Unknown ledger column: {column}")

        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                UPDATE content
                SET {column} = CASE
                    WHEN $2 = ANY({column}) THEN {column}
                    ELSE array_append({column}, $2)
                END
                WHERE id = $1
                RETURNING {CONTENT_COLUMNS}
            """, content_id, username)

            return _row_to_content(row) if row else None

    async def _remove_member(self, content_id: str, column: str, username: str) -> Optional[Content]:
        if column not in LEDGER_COLUMNS:
            raise ValueError(f"Unknown ledger column: {column}")

        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                UPDATE content
                SET {column} = array_remove({column}, $2)
                WHERE id = $1
                RETURNING {CONTENT_COLUMNS}
            """, content_id, username)

            return _row_to_content(row) if row else None
