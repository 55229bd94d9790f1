"""Shared test fixtures for the scheduler tests."""

import sys
from pathlib import Path

import pytest

# Ensure the package is importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from buggang.adapter import SQLiteTaskAdapter
from buggang.schema import Task, TaskStatus
from buggang.store import TaskStore


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "tasks.db")


@pytest.fixture
def adapter(db_path):
    db = SQLiteTaskAdapter(db_path)
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def starter_store():
    """The four starter tasks with ids 1..4."""
    return TaskStore.from_tasks([
        Task(1, "Plan weekly meal prep", TaskStatus.TODO),
        Task(2, "Debug ant trail AI", TaskStatus.IN_PROGRESS),
        Task(3, "Send out team retrospective summary", TaskStatus.COMPLETED),
        Task(4, "Buy more honey dew drops", TaskStatus.TODO),
    ])
