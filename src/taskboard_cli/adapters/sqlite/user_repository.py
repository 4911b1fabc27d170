"""SQLite implementation of the auth gateway.

Accounts live in the ``users`` table with a salted PBKDF2 password hash;
bearer credentials are random tokens whose SHA-256 digest is kept in
``sessions``.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import sqlite3

import tzlocal

from taskboard_cli.adapters.sqlite.connection import get_connection
from taskboard_cli.adapters.sqlite.utils import generate_uuid, now_iso, row_to_dict
from taskboard_cli.models import AuthSession, User, UserCreate
from taskboard_cli.models.exceptions import AuthError, ValidationError
from taskboard_cli.repositories import UserRepository

logger = logging.getLogger(__name__)

PBKDF2_ALGORITHM = "sha256"
PBKDF2_ITERATIONS = 240_000


def get_system_timezone() -> str:
    """Detect system timezone.

    Returns:
        Timezone string (e.g., "America/New_York")
    """
    tz = tzlocal.get_localzone()
    return str(tz.key) if hasattr(tz, "key") else str(tz)


def hash_password(password: str, salt: str | None = None) -> str:
    """Hash a password as ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``."""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        PBKDF2_ALGORITHM, password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS
    )
    return f"pbkdf2_{PBKDF2_ALGORITHM}${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a hash produced by :func:`hash_password`."""
    try:
        algorithm, iterations, salt, expected = encoded.split("$")
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac(
        algorithm.removeprefix("pbkdf2_"),
        password.encode("utf-8"),
        salt.encode("utf-8"),
        int(iterations),
    )
    return hmac.compare_digest(digest.hex(), expected)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SqliteUserRepository(UserRepository):
    """Local auth gateway backed by the SQLite vault."""

    def __init__(self, db_path: str | None = None):
        """Initialize SQLite user repository.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    def _row_to_user(self, row: sqlite3.Row) -> User:
        data = row_to_dict(row)
        data.pop("password_hash", None)
        data.pop("timezone", None)
        return User(**data)

    def _open_session(self, user_id: str) -> str:
        token = secrets.token_urlsafe(32)
        now = now_iso()
        self.connection.execute(
            """INSERT INTO sessions (token_hash, user_id, created_at, last_used_at)
               VALUES (?, ?, ?, ?)""",
            (hash_token(token), user_id, now, now),
        )
        self.connection.commit()
        return token

    async def signup(self, user_data: UserCreate) -> AuthSession:
        """Register a new account and log it in."""
        email = user_data.email.lower()
        name = user_data.name.strip()
        if not name:
            raise ValidationError("Name is required")

        cursor = self.connection.execute("SELECT id FROM users WHERE email = ?", (email,))
        if cursor.fetchone():
            raise ValidationError("User already exists")

        user_id = generate_uuid()
        now = now_iso()
        self.connection.execute(
            """INSERT INTO users (
                id, name, email, password_hash, timezone, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                user_id,
                name,
                email,
                hash_password(user_data.password),
                get_system_timezone(),
                now,
                now,
            ),
        )
        self.connection.commit()
        logger.info("Registered local user %s", user_id)

        token = self._open_session(user_id)
        return AuthSession(token=token, user=await self.resolve(token))

    async def login(self, email: str, password: str) -> AuthSession:
        cursor = self.connection.execute(
            "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
        )
        row = cursor.fetchone()
        # Same message for unknown email and wrong password
        if row is None or not verify_password(password, row["password_hash"]):
            raise AuthError("Invalid email or password")

        token = self._open_session(row["id"])
        return AuthSession(token=token, user=self._row_to_user(row))

    async def logout(self, token: str) -> None:
        self.connection.execute(
            "DELETE FROM sessions WHERE token_hash = ?", (hash_token(token),)
        )
        self.connection.commit()

    async def resolve(self, token: str | None) -> User:
        if not token:
            raise AuthError("Not authorized, no token")

        token_hash = hash_token(token)
        cursor = self.connection.execute(
            """SELECT u.* FROM sessions s
               JOIN users u ON u.id = s.user_id
               WHERE s.token_hash = ?""",
            (token_hash,),
        )
        row = cursor.fetchone()
        if row is None:
            raise AuthError("Not authorized, token failed")

        self.connection.execute(
            "UPDATE sessions SET last_used_at = ? WHERE token_hash = ?",
            (now_iso(), token_hash),
        )
        self.connection.commit()
        return self._row_to_user(row)
