"""
Social Graph Manager
====================

Follow/unfollow edges and interest keywords on user documents.

An edge A -> B is stored twice: B in A.following and A in B.followers.
Every mutation holds the entity locks of both users (sorted order) for the
whole read-check-write, and writes both projections in one transaction, so
no reader sees half an edge and concurrent calls on the same pair cannot
lose an update.
"""
from typing import Optional

from models.domain.user import User, normalize_username
from services.entity_lock import EntityLockManager, user_key
from services.errors import (
    AlreadyFollowing,
    AlreadyPresent,
    NotFollowing,
    NotPresent,
    SelfFollow,
    UserNotFound,
    ValidationError,
)


class SocialGraphService:
    """Follow graph and interest mutations for one identity store."""

    def __init__(self, user_repo, locks: Optional[EntityLockManager] = None):
        self.users = user_repo
        self.locks = locks or EntityLockManager()

    async def get_user(self, username: str) -> User:
        user = await self.users.get_by_username(username)
        if not user:
            raise UserNotFound(
                f"A user with username {username} does not exist.",
                username=username,
            )
        return user

    # =========================================================================
    # EDGES
    # =========================================================================

    async def follow(self, actor_username: str, target_username: str) -> User:
        """
        Make actor follow target.

        Raises:
            SelfFollow: actor and target are the same user
            UserNotFound: either user is absent
            AlreadyFollowing: the edge already exists

        Returns:
            Updated actor
        """
        if normalize_username(actor_username) == normalize_username(target_username):
            raise SelfFollow()

        async with self.locks.hold(user_key(actor_username), user_key(target_username)):
            actor = await self.get_user(actor_username)
            target = await self.get_user(target_username)

            if actor.is_following(target.username):
                raise AlreadyFollowing()

            # add_edge is idempotent per side, so a stale follower entry on
            # target is absorbed rather than duplicated
            return await self.users.add_edge(actor, target)

    async def unfollow(self, actor_username: str, target_username: str) -> User:
        """
        Remove the edge actor -> target from both documents.

        Raises:
            UserNotFound: either user is absent
            NotFollowing: neither projection records the edge

        Returns:
            Updated actor
        """
        async with self.locks.hold(user_key(actor_username), user_key(target_username)):
            actor = await self.get_user(actor_username)
            target = await self.get_user(target_username)

            if not actor.is_following(target.username) and not target.is_followed_by(actor.username):
                raise NotFollowing()

            return await self.users.remove_edge(actor, target)

    # =========================================================================
    # INTERESTS
    # =========================================================================

    async def add_interest(self, actor_username: str, keyword: str) -> User:
        keyword = _clean_keyword(keyword)

        async with self.locks.hold(user_key(actor_username)):
            actor = await self.get_user(actor_username)
            if actor.has_interest(keyword):
                raise AlreadyPresent()
            return await self.users.add_interest(actor.user_id, keyword)

    async def remove_interest(self, actor_username: str, keyword: str) -> User:
        keyword = _clean_keyword(keyword)

        async with self.locks.hold(user_key(actor_username)):
            actor = await self.get_user(actor_username)
            if not actor.has_interest(keyword):
                raise NotPresent()
            return await self.users.remove_interest(actor.user_id, keyword)

    # =========================================================================
    # ACCOUNT DELETION
    # =========================================================================

    async def remove_user(self, username: str) -> bool:
        """Delete a user and every edge that mentions it."""
        async with self.locks.hold(user_key(username)):
            user = await self.get_user(username)
            return await self.users.delete(user)


def _clean_keyword(keyword: str) -> str:
    keyword = (keyword or "").strip()
    if not keyword:
        raise ValidationError("Interest keyword must be non-empty.")
    return keyword
