"""Data access for user accounts."""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from .database import EMAIL_INDEX, USERNAME_INDEX, Database
from .errors import NotFoundError, ValidationError
from .models import User
from .security import hash_password, verify_password
from .validation import validate_new_user

logger = logging.getLogger("userdesk.users")


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _username_in_use(username: str) -> ValidationError:
    return ValidationError(
        f'The username "{username}" is already in use.',
        action="Choose a different username.",
    )


def _email_in_use(email: str) -> ValidationError:
    return ValidationError(
        f'The email "{email}" is already in use.',
        action="Use a different email address.",
    )


class UserRepository:
    """Create, look up, update and delete rows of the ``users`` table."""

    def __init__(self, database: Database) -> None:
        self._database = database

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def find_all(self) -> List[User]:
        results = self._database.query({"text": "SELECT * FROM users"})
        return [self._row_to_user(row) for row in results.rows]

    def find_one_by_username(self, username: str) -> User:
        results = self._database.query(
            {
                "text": "SELECT * FROM users WHERE LOWER(username) = LOWER(?) LIMIT 1",
                "values": [username],
            }
        )
        if results.row_count == 0:
            raise NotFoundError(
                f'The username "{username}" was not found.',
                action='Check that the "username" is spelled correctly.',
            )
        return self._row_to_user(results.rows[0])

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user whose stored hash matches ``password``."""

        results = self._database.query(
            "SELECT * FROM users WHERE LOWER(username) = LOWER(?) LIMIT 1",
            [username],
        )
        if results.row_count == 0:
            return None
        row = results.rows[0]
        if not verify_password(password, str(row["password_hash"])):
            return None
        return self._row_to_user(row)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create(self, user_data: Mapping[str, Any]) -> User:
        """Validate ``user_data`` and insert it as a new user.

        Checks run in order (schema, username, email) and the first failure
        raises :class:`ValidationError`; nothing is written in that case.
        """

        try:
            data = validate_new_user(user_data)
        except ValidationError as exc:
            logger.info("Rejected user registration: %s", exc.message)
            raise

        data["email"] = data["email"].lower()
        self._ensure_unique_username(data["username"])
        self._ensure_unique_email(data["email"])
        user = self._insert(data)
        logger.info("Created user %s (%s)", user.id, user.username)
        return user

    def update_user(self, user_id: int, data: Any) -> List[User]:
        """Overwrite username, email and password of the user ``user_id``.

        Returns the refreshed user in a single-element list, or an empty
        list when no row has that id.
        """

        if not isinstance(data, Mapping):
            raise ValidationError("User data must be an object.")

        username = self._require(data, "username")
        email = self._require(data, "email").lower()
        password_hash = hash_password(self._require(data, "password"))
        updated_at = _serialize_datetime(_current_timestamp())

        try:
            results = self._database.query(
                "UPDATE users SET username = ?, email = ?, password_hash = ?, updated_at = ? WHERE id = ?",
                [username, email, password_hash, updated_at, user_id],
            )
        except sqlite3.IntegrityError as exc:
            conflict = self._translate_conflict(exc, username, email)
            if conflict is None:
                raise
            raise conflict from exc

        if results.row_count == 0:
            return []

        logger.info("Updated user %s", user_id)
        refreshed = self._find_by_id(user_id)
        return [refreshed] if refreshed is not None else []

    def delete_user(self, user_id: int) -> int:
        results = self._database.query("DELETE FROM users WHERE id = ?", [user_id])
        if results.row_count:
            logger.info("Deleted user %s", user_id)
        return results.row_count

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_unique_username(self, username: str) -> None:
        results = self._database.query(
            {
                "text": "SELECT username FROM users WHERE LOWER(username) = LOWER(?)",
                "values": [username],
            }
        )
        if results.row_count > 0:
            raise _username_in_use(username)

    def _ensure_unique_email(self, email: str) -> None:
        results = self._database.query(
            {
                "text": "SELECT email FROM users WHERE LOWER(email) = LOWER(?)",
                "values": [email],
            }
        )
        if results.row_count > 0:
            raise _email_in_use(email)

    def _insert(self, data: Mapping[str, str]) -> User:
        now = _serialize_datetime(_current_timestamp())
        try:
            results = self._database.query(
                {
                    "text": (
                        "INSERT INTO users (username, email, password_hash, created_at, updated_at) "
                        "VALUES (?, ?, ?, ?, ?)"
                    ),
                    "values": [
                        data["username"],
                        data["email"],
                        hash_password(data["password"]),
                        now,
                        now,
                    ],
                }
            )
        except sqlite3.IntegrityError as exc:
            # Another writer claimed the username or email after the checks ran.
            conflict = self._translate_conflict(exc, data["username"], data["email"])
            if conflict is None:
                raise
            raise conflict from exc

        user = self._find_by_id(int(results.last_row_id or 0))
        if user is None:
            raise RuntimeError("Failed to load user after creation")
        return user

    def _find_by_id(self, user_id: int) -> Optional[User]:
        results = self._database.query("SELECT * FROM users WHERE id = ?", [user_id])
        if results.row_count == 0:
            return None
        return self._row_to_user(results.rows[0])

    @staticmethod
    def _require(data: Mapping[str, Any], field: str) -> str:
        value = data.get(field)
        if value is None:
            raise ValidationError(f'"{field}" is a required field.')
        if value == "":
            raise ValidationError(f'"{field}" must not be blank.')
        return str(value)

    @staticmethod
    def _translate_conflict(
        exc: sqlite3.IntegrityError, username: str, email: str
    ) -> Optional[ValidationError]:
        message = str(exc)
        if USERNAME_INDEX in message:
            return _username_in_use(username)
        if EMAIL_INDEX in message:
            return _email_in_use(email)
        return None

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            username=str(row["username"]),
            email=str(row["email"]),
            created_at=_parse_datetime(str(row["created_at"])),
            updated_at=_parse_datetime(str(row["updated_at"])),
        )


__all__ = ["UserRepository"]
