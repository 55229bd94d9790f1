"""
Drag gesture interpretation.

A horizontal drag on a board card moves the task one column right (positive
displacement) or left (negative displacement) once the displacement passes
DRAG_THRESHOLD. Short drags are discarded. The card always snaps back to
its origin on release; a transition re-renders it in its new column.

TaskSyncBridge.drag_task feeds each drag through a DragTracker. Front ends
that stream pointer samples can drive their own tracker and apply the
outcome with TaskSyncBridge.move_task.
"""
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .schema import STATUS_ORDER, TaskStatus

DRAG_THRESHOLD = 50.0

ORIGIN: Tuple[float, float] = (0.0, 0.0)


def interpret_drag(
    dx: float,
    current_status: TaskStatus,
    threshold: float = DRAG_THRESHOLD,
) -> Optional[TaskStatus]:
    """
    Map a released drag displacement to a status transition.

    Returns the new status, or None when the drag is too short, is not a
    finite number, or would move past the first/last column.
    """
    if not math.isfinite(dx) or abs(dx) <= threshold:
        return None
    index = current_status.index
    if dx > 0:
        new_index = index + 1
    else:
        new_index = index - 1
    if new_index < 0 or new_index >= len(STATUS_ORDER):
        return None
    return TaskStatus.at(new_index)


@dataclass
class DragOutcome:
    """Result of releasing a drag."""
    task_id: int
    new_status: Optional[TaskStatus]
    offset: Tuple[float, float] = ORIGIN

    @property
    def transitioned(self) -> bool:
        return self.new_status is not None


class DragTracker:
    """Accumulates pointer deltas for the card currently being dragged."""

    def __init__(self, threshold: float = DRAG_THRESHOLD):
        self.threshold = threshold
        self.task_id: Optional[int] = None
        self.status: Optional[TaskStatus] = None
        self.dx = 0.0
        self.dy = 0.0

    @property
    def active(self) -> bool:
        return self.task_id is not None

    @property
    def offset(self) -> Tuple[float, float]:
        return (self.dx, self.dy)

    def grant(self, task_id: int, status: TaskStatus) -> None:
        """Start dragging a card."""
        self.task_id = task_id
        self.status = status
        self.dx = 0.0
        self.dy = 0.0

    def move(self, dx: float, dy: float = 0.0) -> None:
        if not self.active:
            return
        self.dx += dx
        self.dy += dy

    def release(self) -> Optional[DragOutcome]:
        """Finish the drag. Returns None if no card was being dragged."""
        if not self.active:
            return None
        outcome = DragOutcome(
            task_id=self.task_id,
            new_status=interpret_drag(self.dx, self.status, self.threshold),
        )
        self.task_id = None
        self.status = None
        self.dx = 0.0
        self.dy = 0.0
        return outcome
