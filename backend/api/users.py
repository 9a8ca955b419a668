"""
User API Endpoints
==================

Follow graph, interests and recommendations for the signed-in user.

Endpoints:
- PATCH  /api/users/followers   - Follow a user
- DELETE /api/users/followers   - Unfollow a user
- PATCH  /api/users/interests   - Add an interest keyword
- DELETE /api/users/interests   - Remove an interest keyword
- GET    /api/users/recommended - Authors to follow, by interests
- GET    /api/users/{username}  - Public profile
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from api.dependencies import CoreServices, get_services
from middleware.auth import SessionUser, get_current_user
from models.api.user import (
    FollowRequest,
    InterestRequest,
    UserEnvelope,
    UserListResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/followers", response_model=UserEnvelope)
async def follow(
    body: FollowRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    """
    Follow another user.

    Returns the updated signed-in user.
    """
    user = await services.social_graph.follow(current_user.username, body.username)
    logger.info(f"{current_user.username} followed {body.username}")
    return UserEnvelope(
        message="Successfully followed.",
        user=UserResponse.model_validate(user),
    )


@router.delete("/followers", response_model=UserEnvelope)
async def unfollow(
    body: FollowRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    """Unfollow a user."""
    user = await services.social_graph.unfollow(current_user.username, body.username)
    logger.info(f"{current_user.username} unfollowed {body.username}")
    return UserEnvelope(
        message="Successfully unfollowed.",
        user=UserResponse.model_validate(user),
    )


@router.patch("/interests", response_model=UserEnvelope)
async def add_interest(
    body: InterestRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    user = await services.social_graph.add_interest(current_user.username, body.keyword)
    return UserEnvelope(
        message="Successfully added interest.",
        user=UserResponse.model_validate(user),
    )


@router.delete("/interests", response_model=UserEnvelope)
async def remove_interest(
    body: InterestRequest,
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    user = await services.social_graph.remove_interest(current_user.username, body.keyword)
    return UserEnvelope(
        message="Successfully deleted interest.",
        user=UserResponse.model_validate(user),
    )


@router.get("/recommended", response_model=UserListResponse)
async def recommended(
    limit: Optional[int] = Query(None, ge=0),
    current_user: SessionUser = Depends(get_current_user),
    services: CoreServices = Depends(get_services),
):
    """
    Recommend authors to follow based on the user's interests.

    Authors are ordered by their most recent matching item; `limit`
    truncates the list.
    """
    users = await services.recommendations.recommend(current_user.username, limit=limit)
    return UserListResponse(
        message="Recommended users successfully retrieved.",
        users=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.get("/{username}", response_model=UserResponse)
async def get_user(
    username: str,
    services: CoreServices = Depends(get_services),
):
    user = await services.social_graph.get_user(username)
    return UserResponse.model_validate(user)
