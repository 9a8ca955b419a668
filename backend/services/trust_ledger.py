"""
Content Trust Ledger
====================

Endorsement / denouncement bookkeeping on fact-tagged content.

Gating: only verified users (VSPs) may touch a ledger, and only on content
tagged as fact. Membership preconditions (already endorsed, not yet
denounced, ...) are reported as errors, while the store mutation itself is
an idempotent set operation.

Endorsing and denouncing the same item are tracked independently; one
actor may hold both.
"""
import logging
from typing import Optional

from models.domain.content import Content
from models.domain.user import User
from services.entity_lock import EntityLockManager, content_key
from services.errors import (
    AlreadyDenounced,
    AlreadyEndorsed,
    ContentNotFound,
    NotAFact,
    NotDenounced,
    NotEndorsed,
    NotVerified,
    UserNotFound,
)

logger = logging.getLogger(__name__)


class TrustLedgerService:
    """Endorse/denounce operations over the content store."""

    def __init__(self, content_repo, user_repo, locks: Optional[EntityLockManager] = None):
        self.content = content_repo
        self.users = user_repo
        self.locks = locks or EntityLockManager()

    async def endorse(self, content_id: str, actor_username: str) -> Content:
        async with self.locks.hold(content_key(content_id)):
            item, actor = await self._gate(content_id, actor_username)
            if item.is_endorsed_by(actor.username):
                raise AlreadyEndorsed()
            return await self.content.add_endorser(item.id, actor.username)

    async def unendorse(self, content_id: str, actor_username: str) -> Content:
        async with self.locks.hold(content_key(content_id)):
            item, actor = await self._gate(content_id, actor_username)
            if not item.is_endorsed_by(actor.username):
                raise NotEndorsed()
            return await self.content.remove_endorser(item.id, actor.username)

    async def denounce(self, content_id: str, actor_username: str) -> Content:
        async with self.locks.hold(content_key(content_id)):
            item, actor = await self._gate(content_id, actor_username)
            if item.is_denounced_by(actor.username):
                raise AlreadyDenounced()
            return await self.content.add_denouncer(item.id, actor.username)

    async def undenounce(self, content_id: str, actor_username: str) -> Content:
        async with self.locks.hold(content_key(content_id)):
            item, actor = await self._gate(content_id, actor_username)
            if not item.is_denounced_by(actor.username):
                raise NotDenounced()
            return await self.content.remove_denouncer(item.id, actor.username)

    async def _gate(self, content_id: str, actor_username: str):
        """Resolve content and actor and enforce role/type gating."""
        item = await self.content.get_by_id(content_id)
        if not item:
            raise ContentNotFound(
                f"Content with ID {content_id} does not exist.",
                content_id=content_id,
            )

        actor: Optional[User] = await self.users.get_by_username(actor_username)
        if not actor:
            raise UserNotFound(username=actor_username)

        if not item.is_fact:
            raise NotAFact()
        if not actor.verified:
            logger.info(f"Ledger change by non-VSP {actor.username} on {content_id} rejected")
            raise NotVerified()

        return item, actor
