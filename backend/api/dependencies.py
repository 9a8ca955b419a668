"""
Service wiring for the API routers

The core services are built once at startup (see main.py lifespan) and
handed to routers through the get_services dependency. Tests override
get_services with services built on in-memory stores.
"""
from dataclasses import dataclass
from typing import Optional

from config import Settings
from repositories import (
    ContentRepository,
    RoleRepository,
    UserRepository,
    VSPRequestRepository,
)
from services.authority import RoleTableAuthority
from services.entity_lock import EntityLockManager
from services.errors import CoreError
from services.recommendation import RecommendationService
from services.social_graph import SocialGraphService
from services.trust_ledger import TrustLedgerService
from services.trust_workflow import TrustWorkflowService


class ServiceUnavailable(CoreError):
    code = "service_unavailable"
    http_status = 503
    default_message = "Service not available"


@dataclass
class CoreServices:
    social_graph: SocialGraphService
    ledger: TrustLedgerService
    workflow: TrustWorkflowService
    recommendations: RecommendationService
    authority: RoleTableAuthority


def build_services(
    user_repo,
    content_repo,
    request_repo,
    role_repo,
    locks: EntityLockManager,
    recommendation_limit: int = 0,
) -> CoreServices:
    """Assemble the core services over a set of stores."""
    authority = RoleTableAuthority(role_repo)
    return CoreServices(
        social_graph=SocialGraphService(user_repo, locks),
        ledger=TrustLedgerService(content_repo, user_repo, locks),
        workflow=TrustWorkflowService(request_repo, user_repo, authority, locks),
        recommendations=RecommendationService(
            user_repo, content_repo, default_limit=recommendation_limit
        ),
        authority=authority,
    )


def build_postgres_services(db_pool, redis_client, settings: Settings) -> CoreServices:
    """Core services over PostgreSQL, with Redis locks when configured."""
    locks = EntityLockManager(redis_client, timeout=settings.lock_timeout_seconds)
    return build_services(
        UserRepository(db_pool),
        ContentRepository(db_pool),
        VSPRequestRepository(db_pool),
        RoleRepository(db_pool),
        locks,
        recommendation_limit=settings.recommendation_limit,
    )


_services: Optional[CoreServices] = None


def set_services(services: Optional[CoreServices]) -> None:
    global _services
    _services = services


def get_services() -> CoreServices:
    """FastAPI dependency returning the shared services."""
    if _services is None:
        raise ServiceUnavailable()
    return _services
