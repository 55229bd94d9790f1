"""
Tests for list and board projections.
"""
from buggang.schema import TaskStatus
from buggang.store import TaskStore
from buggang.views import EMPTY_COLUMN_PLACEHOLDER, TaskViewController, ViewMode


def test_default_mode_is_board(starter_store):
    views = TaskViewController(starter_store)
    assert views.mode == ViewMode.BOARD
    assert views.drag_enabled


def test_toggle(starter_store):
    views = TaskViewController(starter_store)
    assert views.toggle() == ViewMode.LIST
    assert not views.drag_enabled
    assert views.toggle() == ViewMode.BOARD


def test_list_omits_empty_sections(starter_store):
    starter_store.set_status(2, TaskStatus.COMPLETED)
    sections = TaskViewController(starter_store, ViewMode.LIST).project()
    assert [s.status for s in sections] == [TaskStatus.TODO, TaskStatus.COMPLETED]
    assert [t.id for t in sections[1].tasks] == [2, 3]


def test_board_keeps_empty_columns_with_placeholder(starter_store):
    starter_store.set_status(2, TaskStatus.COMPLETED)
    columns = TaskViewController(starter_store).board_columns()
    assert [c.status for c in columns] == [TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]
    assert columns[1].tasks == []
    assert columns[1].placeholder == EMPTY_COLUMN_PLACEHOLDER
    assert columns[0].placeholder is None
    assert columns[0].count == 2


def test_empty_store_projections():
    views = TaskViewController(TaskStore())
    assert views.list_sections() == []
    assert len(views.board_columns()) == 3
    assert views.render_text(ViewMode.LIST) == "No tasks found."


def test_projection_reflects_every_mutation(starter_store):
    """No stale projections: each call re-reads the store"""
    views = TaskViewController(starter_store, ViewMode.LIST)
    before = views.to_dict()
    starter_store.add_task("Fresh task")
    after = views.to_dict()
    assert before != after
    todo = after["sections"][0]
    assert todo["title"] == "To Do"
    assert todo["count"] == 3
    assert todo["tasks"][-1]["title"] == "Fresh task"


def test_list_marks_completable_tasks(starter_store):
    data = TaskViewController(starter_store, ViewMode.LIST).to_dict()
    flags = {t["id"]: t["can_complete"] for s in data["sections"] for t in s["tasks"]}
    assert flags == {1: True, 4: True, 2: True, 3: False}


def test_board_dict(starter_store):
    data = TaskViewController(starter_store).to_dict()
    assert data["view"] == "board"
    assert data["drag_enabled"] is True
    assert all(t["can_complete"] is False for s in data["sections"] for t in s["tasks"])


def test_render_text_board(starter_store):
    starter_store.set_status(2, TaskStatus.TODO)
    text = TaskViewController(starter_store).render_text()
    assert "To Do (3)" in text
    assert "In Progress (0)" in text
    assert f"({EMPTY_COLUMN_PLACEHOLDER})" in text
    assert "   2. Debug ant trail AI" in text
