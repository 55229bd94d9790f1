"""
Task schema and status ordering.

Task lifecycle:
  To Do → In Progress → Completed

Transitions are linear in both directions (a drag moves one step), but a
button tap may jump straight to Completed. The status order below is used
for display grouping and for drag index arithmetic.
"""
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Any, Tuple


class TaskStatus(Enum):
    """Valid task states. Values are the literals persisted in the database."""
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def from_str(cls, value: str) -> "TaskStatus":
        """Parse a persisted literal, a member name, or a loose alias."""
        if isinstance(value, cls):
            return value
        raw = str(value).strip()
        for status in cls:
            if raw == status.value:
                return status
        key = raw.lower().replace("-", "").replace("_", "").replace(" ", "")
        status = _ALIASES.get(key)
        if status is None:
            raise ValueError(f"Invalid status: {value!r}")
        return status

    @classmethod
    def at(cls, index: int) -> "TaskStatus":
        """Status at a position in the display order."""
        return STATUS_ORDER[index]

    @property
    def index(self) -> int:
        return STATUS_ORDER.index(self)


STATUS_ORDER: Tuple[TaskStatus, ...] = (
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.COMPLETED,
)

_ALIASES: Dict[str, TaskStatus] = {
    "todo": TaskStatus.TODO,
    "inprogress": TaskStatus.IN_PROGRESS,
    "doing": TaskStatus.IN_PROGRESS,
    "completed": TaskStatus.COMPLETED,
    "complete": TaskStatus.COMPLETED,
    "done": TaskStatus.COMPLETED,
}


@dataclass
class Task:
    """A single tracked task. Only the status changes after creation."""
    id: int
    title: str
    status: TaskStatus = TaskStatus.TODO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            status=TaskStatus.from_str(data.get("status", TaskStatus.TODO.value)),
        )
