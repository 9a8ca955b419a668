"""
Domain Models - Storage-agnostic data structures

These models represent the core domain entities independent of storage layer.
Services operate on these models, not raw database rows.

Architecture:
- Domain models are pure Python objects (dataclasses)
- Storage details (PostgreSQL) are abstracted via repositories
- Business logic operates on these models, not database rows

Trust & Social Graph Models:
- User: identity plus the two projections of the follow graph
- Content: short text item with its endorsement/denouncement ledger
- VSPRequest: verified-status request and its lifecycle status
"""

from .user import User, normalize_username
from .content import Content
from .vsp_request import VSPRequest, VSPRequestStatus

__all__ = [
    'User',
    'Content',
    'VSPRequest',
    'VSPRequestStatus',
    'normalize_username',
]
