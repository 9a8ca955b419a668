"""
User domain model
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from utils.id_generator import generate_user_id, validate_id


def normalize_username(username: str) -> str:
    """Canonical key for case-insensitive username comparison"""
    return (username or "").strip().lower()


def _index_of(names: List[str], username: str) -> int:
    key = normalize_username(username)
    for i, name in enumerate(names):
        if normalize_username(name) == key:
            return i
    return -1


@dataclass
class User:
    """
    User domain model - storage-agnostic representation

    Storage: PostgreSQL (users table)

    `following` and `followers` hold usernames and are two projections of
    the same edge set: B in A.following <=> A in B.followers. Only the
    social graph manager mutates them.

    ID format: us_xxxxxxxx (11 chars)
    """
    user_id: str
    username: str

    # Interest keywords (ordered, no duplicates)
    interests: List[str] = field(default_factory=list)

    # Social graph projections
    following: List[str] = field(default_factory=list)
    followers: List[str] = field(default_factory=list)

    # VSP role flag, written only by the trust workflow
    verified: bool = False

    # Timestamps
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Generate ID if not provided"""
        if not self.user_id or not validate_id(self.user_id, 'user'):
            self.user_id = generate_user_id()

    @property
    def key(self) -> str:
        """Case-insensitive identity of this user"""
        return normalize_username(self.username)

    def same_as(self, username: str) -> bool:
        return self.key == normalize_username(username)

    def is_following(self, username: str) -> bool:
        return _index_of(self.following, username) >= 0

    def is_followed_by(self, username: str) -> bool:
        return _index_of(self.followers, username) >= 0

    def has_interest(self, keyword: str) -> bool:
        return keyword in self.interests

    # Set-semantics mutators; each returns True if the list changed

    def add_following(self, username: str) -> bool:
        if self.is_following(username):
            return False
        self.following.append(username)
        return True

    def remove_following(self, username: str) -> bool:
        index = _index_of(self.following, username)
        if index < 0:
            return False
        del self.following[index]
        return True

    def add_follower(self, username: str) -> bool:
        if self.is_followed_by(username):
            return False
        self.followers.append(username)
        return True

    def remove_follower(self, username: str) -> bool:
        index = _index_of(self.followers, username)
        if index < 0:
            return False
        del self.followers[index]
        return True
