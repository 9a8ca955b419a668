"""
VSP request domain model
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from enum import Enum


class VSPRequestStatus(str, Enum):
    """Verified-status request lifecycle"""
    PENDING = "pending"    # submitted, not yet decided
    GRANTED = "granted"    # accepted, user currently verified
    REVOKED = "revoked"    # accepted then revoked; retired


@dataclass
class VSPRequest:
    """
    VSP request domain model - storage-agnostic representation

    Storage: PostgreSQL (vsp_requests table, keyed by lower(username))

    At most one request per username. A revoked request is retired and
    may be re-opened by a new submission.
    """
    username: str
    justification: str
    status: VSPRequestStatus = VSPRequestStatus.PENDING

    # Timestamps
    requested_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None

    # Admin that made the last decision
    decided_by: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == VSPRequestStatus.PENDING

    @property
    def granted(self) -> bool:
        return self.status == VSPRequestStatus.GRANTED

    @property
    def is_live(self) -> bool:
        """Pending or granted requests block a new submission"""
        return self.status != VSPRequestStatus.REVOKED
