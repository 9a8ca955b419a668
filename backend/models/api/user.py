"""
Pydantic models for User
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional


class FollowRequest(BaseModel):
    """Request body for follow / unfollow"""
    username: str = Field(..., min_length=1)

    @field_validator('username')
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must be non-empty")
        return v


class InterestRequest(BaseModel):
    """Request body for adding / removing an interest keyword"""
    keyword: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public user model (no credentials)"""
    user_id: str
    username: str
    interests: List[str] = []
    following: List[str] = []
    followers: List[str] = []
    verified: bool = False
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class UserEnvelope(BaseModel):
    """Single user with a status message"""
    message: str
    user: UserResponse


class UserListResponse(BaseModel):
    """List of users with a status message"""
    message: str
    users: List[UserResponse]
    total: int
