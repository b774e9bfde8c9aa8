"""User persistence."""

import logging
from typing import Any, Optional

import aiosqlite
from pydantic import BaseModel, ConfigDict

from sessionauth.database import get_database

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when inserting a user whose email is already registered."""

    def __init__(self, email: Optional[str]):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class UserRecord(BaseModel):
    """A registered user. The password is stored as provided."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    password: Optional[str] = None


def _row_to_user(row: aiosqlite.Row) -> UserRecord:
    return UserRecord(
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        age=row["age"],
        password=row["password"],
    )


class UserStore:
    """User records backed by the application database."""

    async def find_all(self) -> list[UserRecord]:
        """Return every registered user."""
        db = await get_database()
        cursor = await db.execute("SELECT * FROM users ORDER BY id")
        rows = await cursor.fetchall()
        return [_row_to_user(row) for row in rows]

    async def find_by_email(self, email: Any) -> Optional[UserRecord]:
        """Return the user registered under ``email``, if any."""
        if email is None:
            return None

        db = await get_database()
        cursor = await db.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        )
        row = await cursor.fetchone()
        if row:
            return _row_to_user(row)
        return None

    async def insert(self, user: UserRecord) -> None:
        """
        Insert a new user.

        Raises:
            DuplicateEmailError: if the email is already taken
        """
        db = await get_database()
        try:
            await db.execute(
                """INSERT INTO users (first_name, last_name, email, age, password)
                   VALUES (?, ?, ?, ?, ?)""",
                (user.first_name, user.last_name, user.email, user.age, user.password)
            )
            await db.commit()
        except aiosqlite.IntegrityError as e:
            await db.rollback()
            raise DuplicateEmailError(user.email) from e


def get_user_store() -> UserStore:
    """Dependency returning the user store."""
    return UserStore()
