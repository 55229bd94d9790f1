"""
List and board projections of the task store.

List mode shows one section per non-empty status. Board mode always shows
all three columns, with a placeholder in empty ones. Both are recomputed
from the store on every call.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .schema import STATUS_ORDER, Task, TaskStatus
from .store import TaskStore

EMPTY_COLUMN_PLACEHOLDER = "Drop tasks here"

STATUS_MARKERS: Dict[TaskStatus, str] = {
    TaskStatus.TODO: "📝",
    TaskStatus.IN_PROGRESS: "🔄",
    TaskStatus.COMPLETED: "✅",
}


class ViewMode(Enum):
    LIST = "list"
    BOARD = "board"

    @classmethod
    def from_str(cls, value: str) -> "ViewMode":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid view mode: {value!r}") from None


@dataclass
class Section:
    """One labeled group of tasks (a list section or a board column)."""
    status: TaskStatus
    tasks: List[Task] = field(default_factory=list)
    placeholder: Optional[str] = None
    show_complete_button: bool = False

    @property
    def title(self) -> str:
        return self.status.value

    @property
    def count(self) -> int:
        return len(self.tasks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "title": self.title,
            "count": self.count,
            "placeholder": self.placeholder,
            "tasks": [
                dict(
                    t.to_dict(),
                    can_complete=self.show_complete_button and t.status != TaskStatus.COMPLETED,
                )
                for t in self.tasks
            ],
        }


class TaskViewController:
    """Derives display projections from a TaskStore."""

    def __init__(self, store: TaskStore, mode: ViewMode = ViewMode.BOARD):
        self.store = store
        self.mode = mode

    def set_mode(self, mode: ViewMode) -> None:
        self.mode = mode

    def toggle(self) -> ViewMode:
        self.mode = ViewMode.LIST if self.mode == ViewMode.BOARD else ViewMode.BOARD
        return self.mode

    @property
    def drag_enabled(self) -> bool:
        """Cards can only be dragged between board columns."""
        return self.mode == ViewMode.BOARD

    def list_sections(self) -> List[Section]:
        groups = self.store.group_by_status()
        return [
            Section(status=status, tasks=groups[status], show_complete_button=True)
            for status in STATUS_ORDER
            if groups[status]
        ]

    def board_columns(self) -> List[Section]:
        groups = self.store.group_by_status()
        return [
            Section(
                status=status,
                tasks=groups[status],
                placeholder=None if groups[status] else EMPTY_COLUMN_PLACEHOLDER,
            )
            for status in STATUS_ORDER
        ]

    def project(self, mode: Optional[ViewMode] = None) -> List[Section]:
        mode = mode or self.mode
        if mode == ViewMode.LIST:
            return self.list_sections()
        return self.board_columns()

    def to_dict(self, mode: Optional[ViewMode] = None) -> Dict[str, Any]:
        mode = mode or self.mode
        return {
            "view": mode.value,
            "drag_enabled": mode == ViewMode.BOARD,
            "sections": [s.to_dict() for s in self.project(mode)],
        }

    def render_text(self, mode: Optional[ViewMode] = None) -> str:
        """Plain-text rendering for terminals."""
        mode = mode or self.mode
        sections = self.project(mode)
        if not sections:
            return "No tasks found."
        lines: List[str] = []
        for section in sections:
            lines.append(f"{STATUS_MARKERS[section.status]} {section.title} ({section.count})")
            for task in section.tasks:
                lines.append(f"   {task.id}. {task.title}")
            if section.placeholder:
                lines.append(f"   ({section.placeholder})")
            lines.append("")
        return "\n".join(lines).rstrip()
