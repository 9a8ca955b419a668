"""
Administrative authority

Admin capability is a role grant in the user_roles table, checked through
the Authority interface. Configuration (ADMIN_USERNAMES) only seeds the
table at startup.
"""
from typing import Iterable, List, Protocol

ADMIN_ROLE = "admin"


class Authority(Protocol):
    """Capability check used by the trust workflow."""

    async def can_administer(self, username: str) -> bool:
        ...


class RoleTableAuthority:
    """Authority backed by RoleRepository."""

    def __init__(self, role_repo):
        self.roles = role_repo

    async def can_administer(self, username: str) -> bool:
        if not username:
            return False
        return await self.roles.has_role(username, ADMIN_ROLE)

    async def seed(self, usernames: Iterable[str]) -> None:
        """Grant the admin role to configured usernames."""
        await self.roles.grant(usernames, ADMIN_ROLE)

    async def grant_admin(self, username: str) -> None:
        await self.roles.grant([username], ADMIN_ROLE)

    async def revoke_admin(self, username: str) -> bool:
        return await self.roles.revoke(username, ADMIN_ROLE)

    async def admins(self) -> List[str]:
        return await self.roles.list_holders(ADMIN_ROLE)
