"""Role-based access guard."""

import logging

from fastapi import Depends, Request, status

from sessionauth.auth.session import Role, SessionStore, SessionUser, get_session, get_session_store
from sessionauth.responses import ApiError

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Usuario no autorizado"
NOT_ADMIN = "Usuario no admin"


async def require_admin(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> SessionUser:
    """Let the request through only for sessions whose user is an admin."""
    try:
        session = await get_session(request, store)
        user = session.user
    except Exception as e:
        logger.error(f"Could not read session for admin check: {e}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    if user is None:
        logger.info("Anonymous request denied admin access")
        raise ApiError(status.HTTP_401_UNAUTHORIZED, NOT_AUTHENTICATED)

    if user.rol != Role.ADMIN:
        logger.warning(f"Non-admin user {user.username} denied admin access")
        raise ApiError(status.HTTP_403_FORBIDDEN, NOT_ADMIN)

    return user
