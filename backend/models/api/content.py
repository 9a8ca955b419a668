"""
Pydantic models for Content and its trust ledger
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class LedgerRequest(BaseModel):
    """Request body for endorse / unendorse / denounce / undenounce"""
    content_id: str = Field(..., min_length=1)


class ContentResponse(BaseModel):
    """Content item with its ledger"""
    id: str
    author_id: str
    body: str
    is_fact: bool
    endorsers: List[str] = []
    denouncers: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ContentEnvelope(BaseModel):
    """Content item with a status message"""
    message: str
    content: ContentResponse
