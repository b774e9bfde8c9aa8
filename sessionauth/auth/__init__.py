"""Authentication module."""

from sessionauth.auth.guard import require_admin
from sessionauth.auth.session import (
    Role,
    Session,
    SessionUser,
    get_session,
    get_session_store,
)

__all__ = [
    "Role",
    "Session",
    "SessionUser",
    "get_session",
    "get_session_store",
    "require_admin",
]
