"""
Seed and reset maintenance operations.

Both take an initialized adapter and report progress through `out`
(print by default) so the CLI and tests can share them.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple

from .adapter import SQLiteTaskAdapter
from .schema import STATUS_ORDER, TaskStatus

logger = logging.getLogger(__name__)

SeedTask = Tuple[str, TaskStatus]

DEFAULT_TASKS: List[SeedTask] = [
    ("Plan weekly meal prep", TaskStatus.TODO),
    ("Debug ant trail AI", TaskStatus.IN_PROGRESS),
    ("Send out team retrospective summary", TaskStatus.COMPLETED),
    ("Buy more honey dew drops", TaskStatus.TODO),
]

SAMPLE_TASKS: List[SeedTask] = DEFAULT_TASKS + [
    ("Review team performance metrics", TaskStatus.TODO),
    ("Update project documentation", TaskStatus.IN_PROGRESS),
    ("Schedule quarterly planning meeting", TaskStatus.TODO),
]


@dataclass
class SeedReport:
    inserted: int = 0
    failed: int = 0
    total: int = 0
    counts: Dict[TaskStatus, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def seed_database(
    adapter: SQLiteTaskAdapter,
    tasks: Sequence[SeedTask] = DEFAULT_TASKS,
    force: bool = False,
    out: Callable[[str], None] = print,
) -> SeedReport:
    """
    Populate the task table.

    Without force, tasks are only inserted into an empty table. With force,
    SAMPLE_TASKS are appended to whatever is already there.
    """
    report = SeedReport()
    existing = adapter.select_all()
    out(f"📊 Current tasks in database: {len(existing)}")

    if not force:
        report.inserted = adapter.seed_if_empty(tasks)
        if report.inserted:
            out(f"✅ Seeded {report.inserted} initial tasks")
        elif existing:
            out("ℹ️  Database already contains tasks; nothing seeded")
            out("💡 Use --force to add sample tasks anyway, or reset first")
        else:
            report.failed = len(tasks)
            out("❌ Seeding failed")
    else:
        if existing:
            out("⚠️  Database already contains tasks; adding more")
        for title, status in SAMPLE_TASKS:
            if adapter.insert(title, status) is not None:
                out(f"   ✅ Added: \"{title}\" ({status.value})")
                report.inserted += 1
            else:
                out(f"   ❌ Failed: \"{title}\"")
                report.failed += 1

    report.total = adapter.count()
    report.counts = adapter.count_by_status()
    out("\n📈 Tasks by status:")
    for status in STATUS_ORDER:
        out(f"   {status.value}: {report.counts[status]}")
    out(f"   Total: {report.total}")
    logger.info("Seed finished inserted=%s failed=%s total=%s",
                report.inserted, report.failed, report.total)
    return report


def reset_database(adapter: SQLiteTaskAdapter, out: Callable[[str], None] = print) -> bool:
    """Delete every task."""
    if adapter.clear_all():
        out("✅ Database reset: all tasks removed")
        return True
    out("❌ Failed to reset database")
    return False
