"""
Trust Elevation Workflow
========================

Request / accept / revoke state machine gating the VSP (verified) role.

Per-username states, derived from the request status:

    NONE ──submit──> PENDING ──accept──> GRANTED ──revoke──> NONE (revoked)
                                                               │
                        submit (re-opens the retired request) ─┘

accept/revoke/list/delete require the admin capability. A decision writes
the request status and the user's verified flag in one transaction while
the user's entity lock is held.
"""
import logging
from enum import Enum
from typing import List, Optional, Tuple

from models.domain.user import User
from models.domain.vsp_request import VSPRequest, VSPRequestStatus
from services.authority import Authority
from services.entity_lock import EntityLockManager, user_key
from services.errors import (
    AlreadyGranted,
    AlreadyVerified,
    NotAuthorized,
    NotYetGranted,
    RequestAlreadyExists,
    RequestNotFound,
    RequestNotPending,
    UserNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    NONE = "none"
    PENDING = "pending"
    GRANTED = "granted"


class TrustWorkflowService:
    """VSP request lifecycle."""

    def __init__(
        self,
        request_repo,
        user_repo,
        authority: Authority,
        locks: Optional[EntityLockManager] = None,
    ):
        self.requests = request_repo
        self.users = user_repo
        self.authority = authority
        self.locks = locks or EntityLockManager()

    # =========================================================================
    # USER ACTIONS
    # =========================================================================

    async def submit(self, username: str, justification: str) -> VSPRequest:
        """
        Submit a VSP request.

        Raises:
            ValidationError: empty justification
            UserNotFound: user is absent
            AlreadyVerified: user already holds the VSP role
            RequestAlreadyExists: a pending or granted request exists
        """
        justification = (justification or "").strip()
        if not justification:
            raise ValidationError("Justification must be non-empty.")

        async with self.locks.hold(user_key(username)):
            user = await self._require_user(username)
            if user.verified:
                raise AlreadyVerified()

            existing = await self.requests.get_by_username(user.username)
            if existing and existing.is_live:
                raise RequestAlreadyExists()

            stored = await self.requests.submit(
                VSPRequest(username=user.username, justification=justification)
            )
            if stored is None:
                raise RequestAlreadyExists()

            logger.info(f"VSP request submitted by {user.username}")
            return stored

    async def state_of(self, username: str) -> WorkflowState:
        request = await self.requests.get_by_username(username)
        if request is None or request.status == VSPRequestStatus.REVOKED:
            return WorkflowState.NONE
        if request.granted:
            return WorkflowState.GRANTED
        return WorkflowState.PENDING

    # =========================================================================
    # ADMIN ACTIONS
    # =========================================================================

    async def accept(self, admin_username: str, username: str) -> Tuple[VSPRequest, User]:
        """
        Accept a pending request and mark the user verified.

        Raises:
            NotAuthorized: caller lacks the admin capability
            RequestNotFound: no request for username
            AlreadyGranted: request is already granted
            RequestNotPending: request was revoked and needs a new submission
        """
        await self._require_admin(admin_username)

        async with self.locks.hold(user_key(username)):
            request = await self._require_request(username)
            if request.granted:
                raise AlreadyGranted()
            if not request.is_pending:
                raise RequestNotPending()

            return await self._decide(username, VSPRequestStatus.GRANTED, True, admin_username)

    async def revoke(self, admin_username: str, username: str) -> Tuple[VSPRequest, User]:
        """
        Revoke a granted request and clear the user's verified flag.

        Raises:
            NotAuthorized, RequestNotFound, NotYetGranted
        """
        await self._require_admin(admin_username)

        async with self.locks.hold(user_key(username)):
            request = await self._require_request(username)
            if not request.granted:
                raise NotYetGranted()

            return await self._decide(username, VSPRequestStatus.REVOKED, False, admin_username)

    async def list_pending(self, admin_username: str) -> List[VSPRequest]:
        await self._require_admin(admin_username)
        return await self.requests.list_by_status(VSPRequestStatus.PENDING)

    async def list_verified(self, admin_username: str) -> List[User]:
        await self._require_admin(admin_username)
        return await self.users.list_verified()

    async def delete_request(self, admin_username: str, username: str) -> bool:
        """Remove a request; a granted one takes the verified flag with it."""
        await self._require_admin(admin_username)

        async with self.locks.hold(user_key(username)):
            request = await self._require_request(username)
            return await self.requests.delete(request.username, clear_verified=request.granted)

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _decide(self, username, status, verified, admin_username):
        try:
            return await self.requests.decide(
                username, status, verified=verified, decided_by=admin_username
            )
        except LookupError as e:
            raise RequestNotFound(str(e), username=username) from e

    async def _require_admin(self, admin_username: str) -> None:
        if not await self.authority.can_administer(admin_username):
            logger.warning(f"Admin action rejected for {admin_username}")
            raise NotAuthorized()

    async def _require_user(self, username: str) -> User:
        user = await self.users.get_by_username(username)
        if not user:
            raise UserNotFound(username=username)
        return user

    async def _require_request(self, username: str) -> VSPRequest:
        request = await self.requests.get_by_username(username)
        if not request:
            raise RequestNotFound(username=username)
        return request
