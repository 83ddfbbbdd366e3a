"""
=============================================================================
DATA STORE GATEWAY
=============================================================================

All SQL lives here. The rest of the server only sees User values and
StoreError.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

There is no pool. Each handled request opens its own connection and
closes it before the response is written:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   handler                                                            │
    │      │                                                               │
    │      ├──► store.session()      sqlite3.connect(path)                 │
    │      │        │                                                      │
    │      │        ├──► insert / fetch / update / delete                  │
    │      │        │                                                      │
    │      │        └──► __exit__    commit (or rollback on error), close  │
    │      │                                                               │
    │      └──► build response                                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The server is single-threaded, so no two sessions are ever open at the
same time inside one process.

=============================================================================
DATABASE URL
=============================================================================

    sqlite:///users.db          → ./users.db   (relative)
    sqlite:////var/lib/users.db → /var/lib/users.db
    /var/lib/users.db           → /var/lib/users.db (bare path)

Any other scheme (postgres://, mysql://, ...) is rejected, and so are
in-memory databases (":memory:", "file:...?mode=memory"): every request
opens its own connection, and each would see a fresh, empty database.

=============================================================================
"""

from typing import List, Optional
import logging
import sqlite3

from .models import User


logger = logging.getLogger(__name__)


SQLITE_SCHEME = "sqlite:///"
MEMORY_DATABASE = ":memory:"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL
)
"""


class StoreError(Exception):
    """
    Any failure talking to the database.

    The underlying sqlite3 exception is chained as __cause__.
    """


def resolve_database_path(database_url: str) -> str:
    """
    Turn DATABASE_URL into a filesystem path for sqlite3.connect().

    Raises:
        StoreError: For empty URLs, non-SQLite schemes and in-memory
                    databases.
    """
    if not database_url:
        raise StoreError("Database URL is empty")

    if database_url.startswith(SQLITE_SCHEME):
        path = database_url[len(SQLITE_SCHEME):]
    elif "://" in database_url:
        scheme = database_url.split("://", 1)[0]
        raise StoreError(f"Unsupported database scheme: {scheme}")
    else:
        path = database_url

    if not path:
        raise StoreError(f"Database URL has no path: {database_url}")

    if _is_in_memory(path):
        raise StoreError(f"In-memory databases cannot be shared between requests: {database_url}")
    return path


def _is_in_memory(path: str) -> bool:
    if path == MEMORY_DATABASE:
        return True
    return path.startswith("file:") and "mode=memory" in path


class StoreSession:
    """
    One open database connection, used for one request.

    Use as a context manager:

        with store.session() as db:
            db.insert(User(name="Ann", email="ann@x.com"))

    Leaving the block commits; leaving it with an exception rolls back.
    Either way the connection is closed.
    """

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def insert(self, user: User) -> None:
        """Insert name/email; the store assigns the id."""
        self._execute(
            "INSERT INTO users (name, email) VALUES (?, ?)",
            (user.name, user.email),
        )

    def fetch_one(self, user_id: int) -> Optional[User]:
        """The user with this id, or None."""
        row = self._execute(
            "SELECT id, name, email FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        return _row_to_user(row) if row is not None else None

    def fetch_all(self) -> List[User]:
        """Every user, ordered by id."""
        rows = self._execute("SELECT id, name, email FROM users ORDER BY id").fetchall()
        return [_row_to_user(row) for row in rows]

    def update(self, user_id: int, user: User) -> int:
        """
        Overwrite name/email of the row with this id.

        Returns:
            Number of rows changed (0 when the id does not exist).
        """
        cursor = self._execute(
            "UPDATE users SET name = ?, email = ? WHERE id = ?",
            (user.name, user.email, user_id),
        )
        return cursor.rowcount

    def delete(self, user_id: int) -> int:
        """
        Delete the row with this id.

        Returns:
            Number of rows removed (0 or 1).
        """
        cursor = self._execute("DELETE FROM users WHERE id = ?", (user_id,))
        return cursor.rowcount

    def create_schema(self) -> None:
        """Create the users table if missing (idempotent)."""
        self._execute(SCHEMA_SQL)

    def _execute(self, sql: str, parameters: tuple = ()) -> sqlite3.Cursor:
        try:
            return self._connection.execute(sql, parameters)
        except sqlite3.Error as e:
            raise StoreError(f"Query failed: {e}") from e

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "StoreSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._connection.commit()
            else:
                self._connection.rollback()
        except sqlite3.Error as e:
            raise StoreError(f"Transaction failed: {e}") from e
        finally:
            self.close()
        return False  # Don't suppress exceptions


def _row_to_user(row: tuple) -> User:
    user_id, name, email = row
    return User(id=user_id, name=name, email=email)


class UserStore:
    """
    Entry point to the users table.

    Holds only the resolved database path; connections are opened on
    demand by session().

    Usage:
        store = UserStore("sqlite:///users.db")
        store.ensure_schema()          # once, at startup

        with store.session() as db:    # once per request
            users = db.fetch_all()
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.database_path = resolve_database_path(database_url)

    def connect(self) -> sqlite3.Connection:
        """
        Open a new connection.

        Raises:
            StoreError: If the database cannot be opened.
        """
        try:
            return sqlite3.connect(self.database_path)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot connect to {self.database_path}: {e}") from e

    def session(self) -> StoreSession:
        """Open a connection wrapped in a StoreSession."""
        logger.debug(f"Opening store session on {self.database_path}")
        return StoreSession(self.connect())

    def ensure_schema(self) -> None:
        """
        Create the users table if it does not exist.

        Raises:
            StoreError: If the database is unreachable or the statement
                        fails. Callers treat this as fatal.
        """
        with self.session() as db:
            db.create_schema()
        logger.info(f"Schema ready in {self.database_path}")
