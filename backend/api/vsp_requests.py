"""
VSP Request API Endpoints
=========================

Verified-status program requests and admin decisions.

Endpoints:
- POST   /api/vsprequest          - Submit a request (signed-in user)
- PUT    /api/vsprequest          - Accept a request (admin)
- DELETE /api/vsprequest/status   - Revoke VSP status (admin)
- GET    /api/vsprequest          - List pending requests (admin)
- GET    /api/vsprequest/VSPs     - List verified users (admin)
- DELETE /api/vsprequest          - Delete a request (admin)
"""

from fastapi import APIRouter, Depends, status
import logging

from api.dependencies import CoreServices, get_services
from middleware.auth import SessionUser, get_current_user
from models.api.user import UserListResponse, UserResponse
from models.api.vsp_request import (
    DecideVSPRequest,
    SubmitVSPRequest,
    VSPRequestEnvelope,
    VSPRequestListResponse,
    VSPRequestResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/vsprequest", tags=["vsprequest"])


@router.post("", response_model=VSPRequestEnvelope, status_code=status.HTTP_201_CREATED)
async def submit_request(
    body: SubmitVSPRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    request = await services.workflow.submit(current_user.username, body.justification)
    return VSPRequestEnvelope(
        message="Request successfully created.",
        vsprequest=VSPRequestResponse.model_validate(request),
    )


@router.put("", response_model=VSPRequestEnvelope)
async def accept_request(
    body: DecideVSPRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    """Accept a pending request; returns the request and the now-verified user."""
    request, user = await services.workflow.accept(current_user.username, body.username)
    logger.info(f"{current_user.username} accepted VSP request of {body.username}")
    return VSPRequestEnvelope(
        message="Request was successfully accepted.",
        vsprequest=VSPRequestResponse.model_validate(request),
        user=UserResponse.model_validate(user),
    )


@router.delete("/status", response_model=VSPRequestEnvelope)
async def revoke_status(
    body: DecideVSPRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    """Revoke VSP status from a user whose request was granted."""
    request, user = await services.workflow.revoke(current_user.username, body.username)
    logger.info(f"{current_user.username} revoked VSP status of {body.username}")
    return VSPRequestEnvelope(
        message="VSP status was successfully revoked.",
        vsprequest=VSPRequestResponse.model_validate(request),
        user=UserResponse.model_validate(user),
    )


@router.get("", response_model=VSPRequestListResponse)
async def list_pending(
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    requests = await services.workflow.list_pending(current_user.username)
    return VSPRequestListResponse(
        message="VSP requests successfully retrieved.",
        vsprequests=[VSPRequestResponse.model_validate(r) for r in requests],
    )


@router.get("/VSPs", response_model=UserListResponse)
async def list_verified(
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    users = await services.workflow.list_verified(current_user.username)
    return UserListResponse(
        message="VSPs successfully retrieved.",
        users=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.delete("")
async def delete_request(
    body: DecideVSPRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    await services.workflow.delete_request(current_user.username, body.username)
    logger.info(f"{current_user.username} deleted VSP request of {body.username}")
    return {"message": "Request was deleted successfully."}
