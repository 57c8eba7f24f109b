# User Store
# SQLite-backed user table holding login identity and provider credentials.
#
# Each method opens its own connection (WAL, busy_timeout), so requests
# never share connection state. Single-row UPDATEs are atomic; concurrent
# writers to the same user resolve last-writer-wins.
#
# sqlite3 errors are wrapped in StoreFailure. The original error is kept
# as __cause__ for server-side logs only.

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Union
from uuid import uuid4

from ..core.errors import DuplicateEmailError, StoreFailure

logger = logging.getLogger(__name__)


@dataclass
class UserRecord:
    """One row of the users table."""
    id: str
    email: str
    password_hash: str
    name: str
    access_token: Optional[str]
    public_key: Optional[str]
    created_at: str
    updated_at: Optional[str]

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "UserRecord":
        return cls(
            id=row["id"],
            email=row["email"],
            password_hash=row["password"],
            name=row["name"],
            access_token=row["access_token"],
            public_key=row["public_key"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


@dataclass
class StoredCredentials:
    """The two credential columns for one user."""
    access_token: Optional[str]
    public_key: Optional[str]


class UserStore:
    """SQLite store for users and their encrypted provider credentials.

    Args:
        db_path: Path to SQLite file. Defaults to data/credvault.db.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path else Path("data/credvault.db")
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self):
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password TEXT NOT NULL,
                    name TEXT NOT NULL,
                    access_token TEXT,
                    public_key TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
            """)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection with WAL mode; commit on success, always close."""
        try:
            conn = sqlite3.connect(str(self.db_path))
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
            conn.row_factory = sqlite3.Row
        except sqlite3.Error as exc:
            logger.error("User store unavailable: %s", exc)
            raise StoreFailure("Store unavailable") from exc

        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("User store error: %s", exc)
            raise StoreFailure("Store operation failed") from exc
        finally:
            conn.close()

    # ── Users ────────────────────────────────────────────────────────

    def create_user(self, email: str, password_hash: str, name: str) -> UserRecord:
        """Insert a new user. Email is lowercased before storage.

        Raises:
            DuplicateEmailError: email already registered
            StoreFailure: database error
        """
        user = UserRecord(
            id=str(uuid4()),
            email=email.strip().lower(),
            password_hash=password_hash,
            name=name,
            access_token=None,
            public_key=None,
            created_at=datetime.now(timezone.utc).isoformat(),
            updated_at=None,
        )
        try:
            with self._connect() as conn:
                conn.execute(
                    """INSERT INTO users
                       (id, email, password, name, access_token, public_key, created_at, updated_at)
                       VALUES (?, ?, ?, ?, NULL, NULL, ?, NULL)""",
                    (user.id, user.email, user.password_hash, user.name, user.created_at),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateEmailError("Email already registered") from exc
        return user

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return UserRecord.from_row(row) if row else None

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
            ).fetchone()
        return UserRecord.from_row(row) if row else None

    # ── Credentials ──────────────────────────────────────────────────

    def get_credentials(self, user_id: str) -> Optional[StoredCredentials]:
        """Return the credential columns, or None if the user does not exist."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT access_token, public_key FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if row is None:
            return None
        return StoredCredentials(access_token=row["access_token"], public_key=row["public_key"])

    def update_credentials(self, user_id: str, access_token: str, public_key: str) -> bool:
        """Overwrite both credential columns. Returns False if no row matched."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            cur = conn.execute(
                """UPDATE users
                   SET access_token = ?, public_key = ?, updated_at = ?
                   WHERE id = ?""",
                (access_token, public_key, now, user_id),
            )
            return cur.rowcount > 0

    def clear_credentials(self, user_id: str) -> bool:
        """Set both credential columns to NULL. Returns False if no row matched."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            cur = conn.execute(
                """UPDATE users
                   SET access_token = NULL, public_key = NULL, updated_at = ?
                   WHERE id = ?""",
                (now, user_id),
            )
            return cur.rowcount > 0
