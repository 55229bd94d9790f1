"""
Task storage backend (SQLite).

CRUD facade over a single `tasks` table. The adapter owns one connection
with an explicit lifecycle:

  UNINITIALIZED --initialize()--> READY --close()--> CLOSED --initialize()--> READY

Data operations outside READY raise NotInitialized. SQLite errors raised by
data operations are logged and turned into a safe default (empty list, zero
counts, False, None).
"""
import logging
import sqlite3
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import NotInitialized, StorageUnavailable
from .schema import STATUS_ORDER, Task, TaskStatus

logger = logging.getLogger(__name__)

TABLE_NAME = "tasks"

CREATE_TASKS_TABLE = f"""
    CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        status TEXT NOT NULL
    )
"""


class AdapterState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection with row access by column name."""
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class SQLiteTaskAdapter:
    """SQLite-backed mirror of the task store."""

    def __init__(self, db_path: str):
        self.db_path = str(db_path)
        self.state = AdapterState.UNINITIALIZED
        self._conn: Optional[sqlite3.Connection] = None

    # ── lifecycle ────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Open the database and create the table if it doesn't exist."""
        try:
            if self._conn is None:
                self._conn = _connect(self.db_path)
            with self._conn:
                self._conn.execute(CREATE_TASKS_TABLE)
        except (sqlite3.Error, OSError) as e:
            self._release()
            raise StorageUnavailable(f"Cannot open database {self.db_path}: {e}") from e
        self.state = AdapterState.READY
        logger.info("Task database ready db=%s", self.db_path)

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self._conn is not None:
            self._release()
            logger.info("Task database closed db=%s", self.db_path)
        if self.state == AdapterState.READY:
            self.state = AdapterState.CLOSED

    def _release(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None:
            try:
                conn.close()
            except sqlite3.Error:
                logger.warning("Error closing database %s", self.db_path, exc_info=True)

    def __enter__(self) -> "SQLiteTaskAdapter":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_ready(self) -> bool:
        return self.state == AdapterState.READY

    def _db(self) -> sqlite3.Connection:
        if self.state != AdapterState.READY or self._conn is None:
            raise NotInitialized(
                f"Database is {self.state.value}. Call initialize() first."
            )
        return self._conn

    # ── writes ───────────────────────────────────────────────────────────

    def seed_if_empty(self, default_tasks: Iterable[Tuple[str, TaskStatus]]) -> int:
        """Insert default_tasks in order if the table is empty. Returns rows inserted."""
        conn = self._db()
        try:
            with conn:
                (count,) = conn.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()
                if count:
                    logger.info("Found %s existing tasks; skipping seed", count)
                    return 0
                inserted = 0
                for title, status in default_tasks:
                    conn.execute(
                        f"INSERT INTO {TABLE_NAME} (title, status) VALUES (?, ?)",
                        (title, TaskStatus.from_str(status).value),
                    )
                    inserted += 1
            logger.info("Seeded %s initial tasks", inserted)
            return inserted
        except sqlite3.Error:
            logger.exception("Error seeding initial tasks")
            return 0

    def insert(self, title: str, status: TaskStatus = TaskStatus.TODO) -> Optional[int]:
        """Insert a row and return its id, or None if the write failed."""
        conn = self._db()
        try:
            with conn:
                cur = conn.execute(
                    f"INSERT INTO {TABLE_NAME} (title, status) VALUES (?, ?)",
                    (title, status.value),
                )
            if not cur.lastrowid:
                logger.warning("No lastrowid returned for task %r", title)
                return None
            logger.debug("Added task %r with id %s", title, cur.lastrowid)
            return int(cur.lastrowid)
        except sqlite3.Error:
            logger.exception("Error adding task %r", title)
            return None

    def update_status(self, task_id: int, status: TaskStatus) -> bool:
        conn = self._db()
        try:
            with conn:
                cur = conn.execute(
                    f"UPDATE {TABLE_NAME} SET status = ? WHERE id = ?",
                    (status.value, int(task_id)),
                )
        except sqlite3.Error:
            logger.exception("Error updating task %s status", task_id)
            return False
        if cur.rowcount > 0:
            logger.debug("Updated task %s status to %r", task_id, status.value)
            return True
        logger.warning("No task found with id %s to update", task_id)
        return False

    def delete(self, task_id: int) -> bool:
        conn = self._db()
        try:
            with conn:
                cur = conn.execute(f"DELETE FROM {TABLE_NAME} WHERE id = ?", (int(task_id),))
        except sqlite3.Error:
            logger.exception("Error deleting task %s", task_id)
            return False
        if cur.rowcount > 0:
            logger.debug("Deleted task %s", task_id)
            return True
        logger.warning("No task found with id %s to delete", task_id)
        return False

    def clear_all(self) -> bool:
        conn = self._db()
        try:
            with conn:
                conn.execute(f"DELETE FROM {TABLE_NAME}")
        except sqlite3.Error:
            logger.exception("Error clearing tasks")
            return False
        logger.info("Cleared all tasks from %s", self.db_path)
        return True

    # ── reads ────────────────────────────────────────────────────────────

    def select_all(self) -> List[Task]:
        """All tasks ordered by id."""
        conn = self._db()
        try:
            rows = conn.execute(f"SELECT * FROM {TABLE_NAME} ORDER BY id ASC").fetchall()
        except sqlite3.Error:
            logger.exception("Error loading tasks")
            return []
        return self._rows_to_tasks(rows)

    def select_by_status(self, status: TaskStatus) -> List[Task]:
        conn = self._db()
        try:
            rows = conn.execute(
                f"SELECT * FROM {TABLE_NAME} WHERE status = ? ORDER BY id ASC",
                (status.value,),
            ).fetchall()
        except sqlite3.Error:
            logger.exception("Error listing tasks by status %r", status.value)
            return []
        return self._rows_to_tasks(rows)

    def count(self) -> int:
        conn = self._db()
        try:
            (n,) = conn.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()
            return int(n)
        except sqlite3.Error:
            logger.exception("Error counting tasks")
            return 0

    def count_by_status(self) -> Dict[TaskStatus, int]:
        """Row count per status; statuses without rows count as zero."""
        counts: Dict[TaskStatus, int] = {status: 0 for status in STATUS_ORDER}
        conn = self._db()
        try:
            rows = conn.execute(
                f"SELECT status, COUNT(*) AS n FROM {TABLE_NAME} GROUP BY status"
            ).fetchall()
        except sqlite3.Error:
            logger.exception("Error getting task counts")
            return counts
        for row in rows:
            try:
                counts[TaskStatus(row["status"])] = int(row["n"])
            except ValueError:
                logger.warning("Ignoring %s rows with unknown status %r", row["n"], row["status"])
        return counts

    def _rows_to_tasks(self, rows: Iterable[sqlite3.Row]) -> List[Task]:
        tasks: List[Task] = []
        for row in rows:
            try:
                tasks.append(Task(id=int(row["id"]), title=row["title"], status=TaskStatus(row["status"])))
            except ValueError:
                logger.warning("Skipping task %s with unknown status %r", row["id"], row["status"])
        return tasks
