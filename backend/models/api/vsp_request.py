"""
Pydantic models for VSP requests
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from models.api.user import UserResponse
from models.domain.vsp_request import VSPRequestStatus


class SubmitVSPRequest(BaseModel):
    """Request body for submitting a VSP request"""
    justification: str = Field(..., min_length=1, max_length=2000)


class DecideVSPRequest(BaseModel):
    """Request body for admin actions on a user's request"""
    username: str = Field(..., min_length=1)


class VSPRequestResponse(BaseModel):
    """VSP request as returned to clients"""
    username: str
    justification: str
    status: VSPRequestStatus
    granted: bool
    requested_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None
    decided_by: Optional[str] = None

    model_config = {"from_attributes": True}


class VSPRequestEnvelope(BaseModel):
    """Request (and, for decisions, the affected user) with a status message"""
    message: str
    vsprequest: VSPRequestResponse
    user: Optional[UserResponse] = None


class VSPRequestListResponse(BaseModel):
    """List of requests"""
    message: str
    vsprequests: List[VSPRequestResponse]
