"""
Content trust ledger router

Endpoints (all take {"content_id": ...}):
- PATCH /api/content/endorse
- PATCH /api/content/unendorse
- PATCH /api/content/denounce
- PATCH /api/content/undenounce
"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import CoreServices, get_services
from middleware.auth import SessionUser, get_current_user
from models.api.content import ContentEnvelope, ContentResponse, LedgerRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/content", tags=["content"])

# route -> (ledger method name, success message)
LEDGER_ROUTES = {
    "endorse": ("endorse", "Content successfully endorsed."),
    "unendorse": ("unendorse", "Endorsement successfully removed."),
    "denounce": ("denounce", "Content successfully denounced."),
    "undenounce": ("undenounce", "Denouncement successfully removed."),
}


def _ledger_endpoint(method_name: str, message: str):
    async def endpoint(
        body: LedgerRequest,
        current_user: SessionUser = Depends(get_current_user),
        services: CoreServices = Depends(get_services),
    ) -> ContentEnvelope:
        operation = getattr(services.ledger, method_name)
        item = await operation(body.content_id, current_user.username)
        logger.info(f"{current_user.username} {method_name} {body.content_id}")
        return ContentEnvelope(
            message=message,
            content=ContentResponse.model_validate(item),
        )

    endpoint.__name__ = f"{method_name}_content"
    return endpoint


for _route, (_method, _message) in LEDGER_ROUTES.items():
    router.add_api_route(
        f"/{_route}",
        _ledger_endpoint(_method, _message),
        methods=["PATCH"],
        response_model=ContentEnvelope,
    )
