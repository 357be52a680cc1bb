"""
auth/store.py -- SQLAlchemy Core persistence layer for users.

Pattern: Repository + Data Mapper. UserStore is the repository; _row_to_user
is the mapper. The service layer never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

Error contract:
  Every SQLAlchemyError is re-raised as InfrastructureError so callers deal
  with one failure type. The exception is a UNIQUE violation on insert: two
  concurrent registrations for the same email can both pass the service's
  existence check, and the loser surfaces here as AuthConflictError.

Atomicity:
  Each public method runs exactly one statement on its own connection and
  commits it. Nothing spans a check and a write.

DB path: auth/authflow_users.db unless DATABASE_URL says otherwise.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.errors import AuthConflictError, InfrastructureError
from auth.models import User

logger = logging.getLogger("authflow.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32)),
)

# Only these columns may be changed through update_by_id().
_UPDATABLE_FIELDS = frozenset({"name", "hashed_password"})


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers do not block behind writers.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore("sqlite:///users.db")
        user_id = store.insert(User(name="Jane Doe", email="jane@x.com", hashed_password=h))
        user = store.find_by_email("jane@x.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite") and ":memory:" not in db_url and "mode=memory" not in db_url:
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def find_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        except SQLAlchemyError as exc:
            raise InfrastructureError("User lookup failed", cause=exc) from exc
        return _row_to_user(row) if row is not None else None

    def find_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        except SQLAlchemyError as exc:
            raise InfrastructureError("User lookup failed", cause=exc) from exc
        return _row_to_user(row) if row is not None else None

    def insert(self, user: User) -> int:
        """Insert a new user and return its assigned ID.

        Raises AuthConflictError if the email is already taken.
        """
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _users.insert().values(
                        name=user.name,
                        email=user.email,
                        hashed_password=user.hashed_password,
                        created_at=_now_iso(),
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise AuthConflictError("User already exists") from exc
        except SQLAlchemyError as exc:
            raise InfrastructureError("User insert failed", cause=exc) from exc
        user_id = result.inserted_primary_key[0]
        logger.info("User created id=%s", user_id)
        return user_id

    def update_by_id(self, user_id: int, **fields) -> bool:
        """Update mutable fields on an existing user and stamp updated_at.

        Accepted fields: name, hashed_password. Unknown fields raise ValueError
        before any SQL runs.

        Returns True if a row was updated, False if user_id was not found.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)!r}")
        if not fields:
            return False
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _users.update().where(_users.c.id == user_id).values(updated_at=_now_iso(), **fields)
                )
                conn.commit()
        except SQLAlchemyError as exc:
            raise InfrastructureError("User update failed", cause=exc) from exc
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
