"""
Repository Pattern - Storage abstraction layer

Repositories hide storage details (PostgreSQL) from business logic.
Consumers work with domain models, not storage-specific types.

Storage:
- UserRepository: users table (identity, interests, follow graph)
- ContentRepository: content table (items and their trust ledger)
- VSPRequestRepository: vsp_requests table (+ users.verified on decisions)
- RoleRepository: user_roles table (administrative authority)
"""
from config import create_postgres_pool
from .user_repository import UserRepository
from .content_repository import ContentRepository
from .vsp_request_repository import VSPRequestRepository
from .role_repository import RoleRepository
from .schema import ensure_schema

# Shared database connection pool (initialized on first use)
db_pool = None


async def get_db_pool():
    """Get or create shared database connection pool"""
    global db_pool
    if db_pool is None:
        db_pool = await create_postgres_pool(min_size=2, max_size=10)
    return db_pool


async def close_db_pool():
    """Close the shared pool (application shutdown)"""
    global db_pool
    if db_pool is not None:
        await db_pool.close()
        db_pool = None


__all__ = [
    'UserRepository',
    'ContentRepository',
    'VSPRequestRepository',
    'RoleRepository',
    'ensure_schema',
    'db_pool',
    'get_db_pool',
    'close_db_pool',
]
