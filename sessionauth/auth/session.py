"""Server-side sessions identified by a signed cookie."""

import json
import logging
import secrets
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional, Protocol

from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from pydantic import BaseModel

from sessionauth.config import get_session_secret, get_settings
from sessionauth.database import get_database

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
USER_KEY = "user"


class Role(str, Enum):
    """Authorization label attached to an authenticated session."""
    USER = "USER"
    ADMIN = "ADMIN"


class SessionUser(BaseModel):
    """The ``user`` attribute of a session."""
    username: Optional[str] = None
    rol: Role


class SessionStore(Protocol):
    """Storage backend for session attributes."""

    async def get(self, sid: str) -> Optional[dict]:
        ...

    async def set(self, sid: str, data: dict, expires_at: datetime) -> None:
        ...

    async def destroy(self, sid: str) -> None:
        ...


class SqliteSessionStore:
    """Session store backed by the ``sessions`` table."""

    async def get(self, sid: str) -> Optional[dict]:
        """Return the attributes of a live session, or None."""
        db = await get_database()
        cursor = await db.execute(
            "SELECT data FROM sessions WHERE sid = ? AND expires_at > ?",
            (sid, datetime.utcnow().isoformat())
        )
        row = await cursor.fetchone()
        if row:
            return json.loads(row["data"])
        return None

    async def set(self, sid: str, data: dict, expires_at: datetime) -> None:
        """Create or replace a session."""
        db = await get_database()
        now = datetime.utcnow().isoformat()
        await db.execute(
            """INSERT INTO sessions (sid, data, updated_at, expires_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(sid) DO UPDATE SET
               data = excluded.data,
               updated_at = excluded.updated_at,
               expires_at = excluded.expires_at""",
            (sid, json.dumps(data), now, expires_at.isoformat())
        )
        await db.commit()

    async def destroy(self, sid: str) -> None:
        """Delete a session. Deleting an unknown session is a no-op."""
        db = await get_database()
        await db.execute("DELETE FROM sessions WHERE sid = ?", (sid,))
        await db.commit()

    async def purge_expired(self) -> int:
        """Delete expired sessions and return how many were removed."""
        db = await get_database()
        cursor = await db.execute(
            "DELETE FROM sessions WHERE expires_at <= ? RETURNING sid",
            (datetime.utcnow().isoformat(),)
        )
        deleted = await cursor.fetchall()
        await db.commit()
        return len(deleted)


def create_session_token(sid: str, expires_at: datetime) -> str:
    """Sign a session identifier for the session cookie."""
    data = {"sid": sid, "exp": expires_at}
    return jwt.encode(data, get_session_secret(), algorithm=ALGORITHM)


def verify_session_token(token: str) -> Optional[str]:
    """Return the session identifier carried by a cookie token."""
    try:
        payload = jwt.decode(token, get_session_secret(), algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"Invalid session token: {e}")
        return None
    return payload.get("sid")


class Session:
    """
    Per-request view of a session.

    A session is created implicitly on first access and only persisted once
    an attribute is written.
    """

    def __init__(self, store: SessionStore, sid: Optional[str] = None, data: Optional[dict] = None):
        self.store = store
        self.is_new = sid is None
        self.sid = sid or secrets.token_urlsafe(32)
        self.data: dict = data if data is not None else {}
        self.expires_at: Optional[datetime] = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        """Set an attribute and persist the session."""
        settings = get_settings()
        self.data[key] = value
        self.expires_at = datetime.utcnow() + timedelta(days=settings.session_expire_days)
        await self.store.set(self.sid, self.data, self.expires_at)

    async def destroy(self) -> None:
        """Remove the session from the store."""
        await self.store.destroy(self.sid)
        self.data = {}

    @property
    def user(self) -> Optional[SessionUser]:
        """The authenticated user, if any."""
        raw = self.get(USER_KEY)
        if not raw:
            return None
        return SessionUser.model_validate(raw)

    async def set_user(self, user: SessionUser) -> None:
        await self.set(USER_KEY, user.model_dump(mode="json"))

    def attach_cookie(self, response: Response) -> None:
        """Send the signed session identifier to the client."""
        settings = get_settings()
        expires_at = self.expires_at or (
            datetime.utcnow() + timedelta(days=settings.session_expire_days)
        )
        response.set_cookie(
            key=settings.session_cookie_name,
            value=create_session_token(self.sid, expires_at),
            max_age=settings.session_expire_days * 24 * 60 * 60,
            httponly=True,
            samesite="lax",
            secure=settings.public_url.startswith("https://"),
        )

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(get_settings().session_cookie_name)


def get_session_store() -> SessionStore:
    """Dependency returning the session store."""
    return SqliteSessionStore()


async def get_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> Session:
    """Resolve the session for the current request."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        sid = verify_session_token(token)
        if sid:
            data = await store.get(sid)
            if data is not None:
                return Session(store, sid=sid, data=data)

    return Session(store)
