"""Tournament snapshot storage."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from .exceptions import InvalidSnapshotError
from .models import TournamentState

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    """Storage port the tournament manager reads and writes through."""

    def load(self) -> TournamentState | None: ...

    def save(self, state: TournamentState) -> None: ...

    def clear(self) -> None: ...


class InMemorySnapshotStore:
    """Keeps the serialized snapshot in process memory."""

    def __init__(self, state: TournamentState | None = None):
        self._payload: str | None = state.model_dump_json() if state else None

    def load(self) -> TournamentState | None:
        if self._payload is None:
            return None
        return TournamentState.model_validate_json(self._payload)

    def save(self, state: TournamentState) -> None:
        self._payload = state.model_dump_json()

    def clear(self) -> None:
        self._payload = None


class TournamentDatabaseManager:
    """Stores the tournament snapshot as a JSON document in SQLite."""

    def __init__(
        self, db_path: str = "tournament.db", snapshot_key: str = "tournament-state"
    ):
        self.db_path = Path(db_path)
        self.snapshot_key = snapshot_key
        self._init_database()

    @contextmanager
    def _get_connection(self):
        """Get a database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row  # Enable column access by name
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            logger.error(f"Tournament database error: {e}")
            raise
        finally:
            if conn:
                conn.close()

    def _init_database(self) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS snapshots (
                    key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def load(self) -> TournamentState | None:
        """Load the stored snapshot, or None when nothing was saved yet."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT payload FROM snapshots WHERE key = ?", (self.snapshot_key,)
            )
            row = cursor.fetchone()

        if not row:
            return None

        try:
            return TournamentState.model_validate_json(row["payload"])
        except ValidationError as e:
            logger.error(f"Stored snapshot {self.snapshot_key} is unreadable: {e}")
            raise InvalidSnapshotError("Stored tournament data is corrupted") from e

    def save(self, state: TournamentState) -> None:
        """Replace the stored snapshot."""
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO snapshots (key, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (
                    self.snapshot_key,
                    state.model_dump_json(),
                    datetime.now().isoformat(),
                ),
            )
            conn.commit()

        logger.debug(
            f"Saved snapshot {self.snapshot_key}: "
            f"{len(state.participants)} participants, "
            f"{len(state.config.matches)} matches"
        )

    def clear(self) -> None:
        """Remove the stored snapshot."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM snapshots WHERE key = ?", (self.snapshot_key,))
            deleted = cursor.rowcount > 0
            conn.commit()

        if deleted:
            logger.info(f"Cleared snapshot {self.snapshot_key}")
