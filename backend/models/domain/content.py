"""
Content domain model
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from utils.id_generator import generate_content_id, validate_id


@dataclass
class Content:
    """
    Content domain model - storage-agnostic representation

    Storage: PostgreSQL (content table)

    A short text item ("freet"). `is_fact` is fixed at creation; only
    fact-tagged items carry a trust ledger. `endorsers` and `denouncers`
    are usernames with set semantics, mutated only by the trust ledger.

    ID format: ct_xxxxxxxx (11 chars)
    """
    id: str
    author_id: str  # us_xxxxxxxx
    body: str
    is_fact: bool = False

    # Trust ledger
    endorsers: List[str] = field(default_factory=list)
    denouncers: List[str] = field(default_factory=list)

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate and generate ID if needed"""
        if not self.id or not validate_id(self.id, 'content'):
            self.id = generate_content_id()

    def is_endorsed_by(self, username: str) -> bool:
        return username in self.endorsers

    def is_denounced_by(self, username: str) -> bool:
        return username in self.denouncers

    def mentions_any(self, keywords: List[str]) -> bool:
        """True if the body contains any keyword as a literal substring"""
        return any(keyword in self.body for keyword in keywords)
