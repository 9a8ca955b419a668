"""
Recommendation Engine
=====================

Suggests authors to follow from a user's interest keywords.

Algorithm (read-only):
1. Walk all content, most recently modified first
2. Skip items by the user or by authors the user already follows
3. An item matches if its body contains any interest as a literal,
   case-sensitive substring
4. Return distinct matching authors in order of first match

Cost is O(items x interests) per call.
"""
from typing import List, Optional

from models.domain.user import User
from services.errors import NoInterests, UserNotFound, ValidationError


class RecommendationService:
    """Interest-driven follow suggestions."""

    def __init__(self, user_repo, content_repo, default_limit: int = 0):
        self.users = user_repo
        self.content = content_repo
        self.default_limit = default_limit

    async def recommend(self, username: str, limit: Optional[int] = None) -> List[User]:
        """
        Recommend authors for username to follow.

        Args:
            username: User to recommend for
            limit: Max authors to return; None uses the configured default,
                   0 means unlimited

        Raises:
            ValidationError: limit is negative
            UserNotFound: user is absent
            NoInterests: user has no interest keywords

        Returns:
            Authors ordered by their most recent matching item
        """
        if limit is None:
            limit = self.default_limit
        if limit < 0:
            raise ValidationError("limit must be zero or positive.", limit=limit)

        user = await self.users.get_by_username(username)
        if not user:
            raise UserNotFound(username=username)
        if not user.interests:
            raise NoInterests()

        items = await self.content.list_recent(exclude_author_ids=[user.user_id])
        authors = await self.users.get_many_by_ids(item.author_id for item in items)

        recommended: List[User] = []
        seen = set()
        for item in items:
            if item.author_id in seen:
                continue

            author = authors.get(item.author_id)
            if author is None or author.same_as(user.username):
                continue
            if user.is_following(author.username):
                continue

            if item.mentions_any(user.interests):
                seen.add(item.author_id)
                recommended.append(author)
                if limit and len(recommended) >= limit:
                    break

        return recommended
