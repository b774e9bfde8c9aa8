"""Session expiry cleanup job."""

import logging

from sessionauth.auth.session import SqliteSessionStore

logger = logging.getLogger(__name__)


async def purge_expired_sessions() -> int:
    """Delete sessions past their expiry and return how many were removed."""
    removed = await SqliteSessionStore().purge_expired()
    if removed:
        logger.info(f"Session cleanup removed {removed} expired sessions")
    return removed
