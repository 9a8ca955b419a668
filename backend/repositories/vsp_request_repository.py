"""
VSP Request Repository - PostgreSQL storage for verified-status requests

Storage: PostgreSQL (vsp_requests table, users.verified)

A decision changes the request status and the user's verified flag; both
writes share one transaction.
"""
import logging
from typing import List, Optional, Tuple

import asyncpg

from models.domain.user import User, normalize_username
from models.domain.vsp_request import VSPRequest, VSPRequestStatus
from repositories.user_repository import USER_COLUMNS, _row_to_user

logger = logging.getLogger(__name__)


REQUEST_COLUMNS = """
    username, justification, status, requested_at, decided_at, decided_by
"""


def _row_to_request(row) -> VSPRequest:
    return VSPRequest(
        username=row['username'],
        justification=row['justification'],
        status=VSPRequestStatus(row['status']),
        requested_at=row['requested_at'],
        decided_at=row['decided_at'],
        decided_by=row['decided_by'],
    )


class VSPRequestRepository:
    """
    Repository for VSPRequest domain model

    One row per username; a retired (revoked) row is reused on resubmission.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_username(self, username: str) -> Optional[VSPRequest]:
        """
        Retrieve a user's request (case-insensitive).

        Returns:
            VSPRequest model or None
        """
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {REQUEST_COLUMNS}
                FROM vsp_requests
                WHERE username_key = $1
            """, normalize_username(username))

            return _row_to_request(row) if row else None

    async def list_by_status(self, status: VSPRequestStatus) -> List[VSPRequest]:
        """List requests in a status, oldest first."""
        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {REQUEST_COLUMNS}
                FROM vsp_requests
                WHERE status = $1
                ORDER BY requested_at ASC
            """, status.value)

            return [_row_to_request(row) for row in rows]

    # =========================================================================
    # CREATE OPERATION
    # =========================================================================

    async def submit(self, request: VSPRequest) -> Optional[VSPRequest]:
        """
        Insert a pending request, or re-open a revoked one.

        Returns:
            The stored request, or None if a live request already exists
        """
        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                INSERT INTO vsp_requests (
                    username_key, username, justification, status,
                    requested_at, decided_at, decided_by
                )
                VALUES ($1, $2, $3, 'pending', NOW(), NULL, NULL)
                ON CONFLICT (username_key) DO UPDATE SET
                    username = EXCLUDED.username,
                    justification = EXCLUDED.justification,
                    status = 'pending',
                    requested_at = NOW(),
                    decided_at = NULL,
                    decided_by = NULL
                WHERE vsp_requests.status = 'revoked'
                RETURNING {REQUEST_COLUMNS}
            """,
                normalize_username(request.username),
                request.username,
                request.justification
            )

            if not row:
                return None

            logger.info(f"Stored VSP request for {request.username}")
            return _row_to_request(row)

    # =========================================================================
    # DECISIONS
    # =========================================================================

    async def decide(
        self,
        username: str,
        status: VSPRequestStatus,
        verified: bool,
        decided_by: str,
    ) -> Tuple[VSPRequest, User]:
        """
        Set request status and the user's verified flag in one transaction.

        Args:
            username: Requesting user
            status: New request status
            verified: New value of users.verified
            decided_by: Admin username recorded on the request

        Returns:
            (updated request, updated user)
        """
        key = normalize_username(username)

        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                request_row = await conn.fetchrow(f"""
                    UPDATE vsp_requests
                    SET status = $2, decided_at = NOW(), decided_by = $3
                    WHERE username_key = $1
                    RETURNING {REQUEST_COLUMNS}
                """, key, status.value, decided_by)

                user_row = await conn.fetchrow(f"""
                    UPDATE users
                    SET verified = $2
                    WHERE lower(username) = $1
                    RETURNING {USER_COLUMNS}
                """, key, verified)

                if not request_row or not user_row:
                    # Raising inside the block rolls back both writes
                    raise LookupError(f"Request or user missing for {username}")

            logger.info(f"VSP request for {username} -> {status.value} (by {decided_by})")
            return _row_to_request(request_row), _row_to_user(user_row)

    # =========================================================================
    # DELETE OPERATION
    # =========================================================================

    async def delete(self, username: str, clear_verified: bool) -> bool:
        """
        Delete a request; optionally clear the user's verified flag with it.

        Returns:
            True if a request row was deleted
        """
        key = normalize_username(username)

        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                result = await conn.execute("""
                    DELETE FROM vsp_requests WHERE username_key = $1
                """, key)

                if clear_verified:
                    await conn.execute("""
                        UPDATE users SET verified = false WHERE lower(username) = $1
                    """, key)

            rows_deleted = int(result.split()[-1])
            if rows_deleted > 0:
                logger.info(f"Deleted VSP request for {username}")
                return True
            return False
