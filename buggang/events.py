"""
Sync bridge: applies task mutations to the in-memory store and mirrors them
into the SQLite adapter (write-through).

The store always wins. When an adapter write fails the in-memory change is
kept, the failure is logged and recorded, and a "sync_failed" event is
emitted. Nothing is retried or rolled back.

Tasks whose insert never reached the database keep a local id that may
belong to another row there, so they are never mirrored by id. Mutations
on them report persisted=False.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set

from .adapter import SQLiteTaskAdapter
from .errors import ValidationError
from .gestures import DRAG_THRESHOLD, DragTracker
from .schema import Task, TaskStatus
from .store import TaskStore

logger = logging.getLogger(__name__)

EVENT_TYPES = ("task_added", "task_updated", "task_deleted", "tasks_cleared", "sync_failed")


@dataclass
class SyncResult:
    """Outcome of one mutation. task is None when the id was not found."""
    task: Optional[Task]
    persisted: bool
    changed: bool = True

    @property
    def found(self) -> bool:
        return self.task is not None


@dataclass
class SyncError:
    operation: str
    task_id: Optional[int]
    message: str


class TaskSyncBridge:
    """Routes user actions to the task store and its database mirror."""

    def __init__(
        self,
        store: TaskStore,
        adapter: SQLiteTaskAdapter,
        drag_threshold: float = DRAG_THRESHOLD,
    ):
        self.store = store
        self.adapter = adapter
        self.drag_threshold = drag_threshold
        self.tracker = DragTracker(drag_threshold)
        self.subscribers: Dict[str, list] = {}  # event_type -> list of callbacks
        self.sync_errors: List[SyncError] = []
        self.unsynced: Set[int] = set()  # local ids with no database row

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """Register a callback for an event type."""
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Invalid event_type: {event_type}")
        self.subscribers.setdefault(event_type, []).append(callback)

    def _emit(self, event_type: str, **kwargs) -> None:
        """Emit an event to all subscribers."""
        for callback in self.subscribers.get(event_type, []):
            try:
                callback(**kwargs)
            except Exception:
                logger.exception("Error in %s callback", event_type)

    def _sync_failed(self, operation: str, task_id: Optional[int], message: str) -> None:
        logger.warning("Sync failed: %s task=%s: %s", operation, task_id, message)
        self.sync_errors.append(SyncError(operation, task_id, message))
        self._emit("sync_failed", operation=operation, task_id=task_id, message=message)

    # ── loading ──────────────────────────────────────────────────────────

    def load(self) -> int:
        """Replace the store's contents with the persisted tasks."""
        tasks = self.adapter.select_all()
        self.store.replace(tasks)
        self.unsynced.clear()
        logger.info("Loaded %s tasks from database", len(tasks))
        return len(tasks)

    # ── mutations ────────────────────────────────────────────────────────

    def add_task(self, title: str) -> SyncResult:
        """Create a To Do task. Raises ValidationError for empty titles."""
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Task title must not be empty")
        task_id = self.adapter.insert(cleaned, TaskStatus.TODO)
        orphan = None
        # An id held by an unsynced task: drop the row and insert again.
        # AUTOINCREMENT never reissues the dropped id.
        while task_id is not None and self.store.get_task(task_id) is not None:
            if not self.adapter.delete(task_id):
                orphan = task_id
                break
            logger.info("Database id %s is held by an unsynced task; reinserting", task_id)
            task_id = self.adapter.insert(cleaned, TaskStatus.TODO)

        if task_id is not None and orphan is None:
            task = self.store.add_task(cleaned, task_id=task_id)
            persisted = True
        else:
            task = self.store.add_task(cleaned)
            persisted = False
            self.unsynced.add(task.id)
            if orphan is not None:
                self._sync_failed("insert", task.id, f"database id {orphan} already in use")
            else:
                self._sync_failed("insert", task.id, "database insert failed")
        self._emit("task_added", task=task)
        return SyncResult(task=task, persisted=persisted)

    def move_task(self, task_id: int, new_status: TaskStatus) -> SyncResult:
        task = self.store.get_task(task_id)
        if task is None:
            return SyncResult(task=None, persisted=False, changed=False)
        if task.status == new_status:
            return SyncResult(task=task, persisted=task_id not in self.unsynced, changed=False)
        self.store.set_status(task_id, new_status)
        if task_id in self.unsynced:
            persisted = False
            self._sync_failed("update_status", task_id, "task has no database row")
        else:
            persisted = self.adapter.update_status(task_id, new_status)
            if not persisted:
                self._sync_failed("update_status", task_id, "no database row updated")
        self._emit("task_updated", task=task)
        return SyncResult(task=task, persisted=persisted)

    def complete_task(self, task_id: int) -> SyncResult:
        return self.move_task(task_id, TaskStatus.COMPLETED)

    def drag_task(self, task_id: int, dx: float) -> SyncResult:
        """Apply a released drag. changed is False when the drag was discarded."""
        task = self.store.get_task(task_id)
        if task is None:
            return SyncResult(task=None, persisted=False, changed=False)
        self.tracker.grant(task.id, task.status)
        self.tracker.move(dx)
        outcome = self.tracker.release()
        if not outcome.transitioned:
            return SyncResult(task=task, persisted=task_id not in self.unsynced, changed=False)
        return self.move_task(task_id, outcome.new_status)

    def delete_task(self, task_id: int) -> SyncResult:
        task = self.store.get_task(task_id)
        if task is None:
            return SyncResult(task=None, persisted=False, changed=False)
        self.store.remove_task(task_id)
        if task_id in self.unsynced:
            self.unsynced.discard(task_id)
            persisted = False
            self._sync_failed("delete", task_id, "task has no database row")
        else:
            persisted = self.adapter.delete(task_id)
            if not persisted:
                self._sync_failed("delete", task_id, "no database row deleted")
        self._emit("task_deleted", task=task)
        return SyncResult(task=task, persisted=persisted)

    def clear(self) -> bool:
        self.store.clear()
        self.unsynced.clear()
        persisted = self.adapter.clear_all()
        if not persisted:
            self._sync_failed("clear_all", None, "database clear failed")
        self._emit("tasks_cleared")
        return persisted
