"""
In-memory task store.

Holds the authoritative task list for a session. The SQLite adapter is a
mirror of this list, never a second source of truth.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import ValidationError
from .schema import STATUS_ORDER, Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """Ordered collection of tasks with status transitions."""

    def __init__(self):
        self._tasks: List[Task] = []
        self._next_id: int = 1

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> "TaskStore":
        """Build a store from persisted rows, keeping their ids."""
        store = cls()
        store.replace(tasks)
        return store

    def replace(self, tasks: Iterable[Task]) -> None:
        """Swap the whole list for the given tasks (copied), e.g. after a reload."""
        self._tasks = []
        for task in tasks:
            self._append(Task(id=task.id, title=task.title, status=task.status))

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    def _append(self, task: Task) -> None:
        if self.get_task(task.id) is not None:
            raise ValueError(f"Task id {task.id} already in use")
        self._tasks.append(task)
        # ids stay monotonic even after deletes
        self._next_id = max(self._next_id, task.id + 1)

    # -------------------- queries --------------------
    def list_tasks(self) -> List[Task]:
        return list(self._tasks)

    def get_task(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def group_by_status(self) -> Dict[TaskStatus, List[Task]]:
        """Partition tasks by status, keeping list order inside each group."""
        groups: Dict[TaskStatus, List[Task]] = {status: [] for status in STATUS_ORDER}
        for task in self._tasks:
            groups[task.status].append(task)
        return groups

    # -------------------- task operations --------------------
    def add_task(self, title: str, task_id: Optional[int] = None) -> Task:
        """Create a To Do task. Pass task_id to reuse an id assigned by the database."""
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Task title must not be empty")
        task = Task(
            id=task_id if task_id is not None else self._allocate_id(),
            title=cleaned,
            status=TaskStatus.TODO,
        )
        self._append(task)
        logger.debug("Task added id=%s title=%r", task.id, task.title)
        return task

    def set_status(self, task_id: int, new_status: TaskStatus) -> Optional[Task]:
        """Move a task to new_status in place. Returns None if the id is unknown."""
        task = self.get_task(task_id)
        if task is None:
            return None
        if task.status != new_status:
            logger.debug("Task %s: %s -> %s", task_id, task.status.value, new_status.value)
            task.status = new_status
        return task

    def complete_task(self, task_id: int) -> Optional[Task]:
        return self.set_status(task_id, TaskStatus.COMPLETED)

    def remove_task(self, task_id: int) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        return True

    def clear(self) -> None:
        self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __str__(self) -> str:
        groups = self.group_by_status()
        return ", ".join(f"{status.value}: {len(groups[status])} tasks" for status in STATUS_ORDER)
