"""
Authentication dependencies

The session is a JWT in the `access_token` cookie; handlers receive the
authenticated identity as a SessionUser.
"""

from fastapi import Request
from jose import JWTError
from typing import Optional

from services.errors import Unauthenticated
from .jwt_session import decode_access_token


class SessionUser:
    """Minimal user info from JWT token"""
    def __init__(self, user_id: str, username: str):
        self.user_id = user_id
        self.username = username


async def get_current_user_optional(request: Request) -> Optional[SessionUser]:
    """
    Get current user from JWT token (optional - doesn't raise if not authenticated)

    Returns:
        SessionUser if authenticated, None otherwise
    """
    token = request.cookies.get("access_token")

    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except JWTError:
        return None

    user_id = payload.get("sub")
    username = payload.get("username")
    if not user_id or not username:
        return None

    return SessionUser(user_id=user_id, username=username)


async def get_current_user(request: Request) -> SessionUser:
    """
    Get current user (required)

    Returns:
        SessionUser

    Raises:
        Unauthenticated if no valid session
    """
    user = await get_current_user_optional(request)

    if not user:
        raise Unauthenticated()

    return user
