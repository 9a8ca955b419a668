"""
Pytest configuration for the trust core tests.
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from api.dependencies import build_services
from fakes import (
    FakeContentRepository,
    FakeRoleRepository,
    FakeUserRepository,
    FakeVSPRequestRepository,
)
from models.domain.user import User
from services.entity_lock import EntityLockManager

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    """Configure pytest with asyncio marker."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test."
    )


# ============================================================================
# STORES
# ============================================================================

@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def content_repo():
    return FakeContentRepository()


@pytest.fixture
def request_repo(user_repo):
    return FakeVSPRequestRepository(user_repo)


@pytest.fixture
def role_repo(user_repo):
    return FakeRoleRepository(user_repo)


@pytest.fixture
def locks():
    return EntityLockManager(timeout=1.0)


@pytest_asyncio.fixture
async def services(user_repo, content_repo, request_repo, role_repo, locks):
    """Core services over in-memory stores, with 'lola' as admin."""
    core = build_services(user_repo, content_repo, request_repo, role_repo, locks)
    await core.authority.seed(["lola"])
    return core


# ============================================================================
# USERS
# ============================================================================

@pytest.fixture
def make_user(user_repo):
    """Create and store a user: make_user("alice", interests=["rust"])."""
    def _make(username: str, **fields) -> User:
        return user_repo.put(User(user_id="", username=username, **fields))
    return _make


@pytest.fixture
def people(make_user):
    """alice, bob, carol, dave and the admin lola."""
    return {
        name: make_user(name)
        for name in ("alice", "bob", "carol", "dave", "lola")
    }
