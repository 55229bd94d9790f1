"""
Tests for seeding/reset operations and the buggang command line.
"""
import pytest

from buggang.adapter import AdapterState, SQLiteTaskAdapter
from buggang.cli import main
from buggang.schema import TaskStatus
from buggang.seeding import DEFAULT_TASKS, SAMPLE_TASKS, reset_database, seed_database


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's config and env vars out of CLI runs"""
    monkeypatch.delenv("BUGGANG_DB", raising=False)
    monkeypatch.delenv("BUGGANG_API_SECRET", raising=False)
    monkeypatch.setattr("buggang.config.CONFIG_PATH", tmp_path / "missing.yaml")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Seeding Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_seed_database_on_empty_table(adapter):
    lines = []
    report = seed_database(adapter, out=lines.append)
    assert report.ok
    assert report.inserted == 4
    assert report.total == 4
    assert report.counts[TaskStatus.TODO] == 2
    assert any("Seeded 4" in line for line in lines)


def test_seed_database_twice_is_noop(adapter):
    seed_database(adapter, out=lambda line: None)
    report = seed_database(adapter, out=lambda line: None)
    assert report.inserted == 0
    assert report.ok
    assert report.total == 4


def test_seed_database_force_appends_samples(adapter):
    seed_database(adapter, out=lambda line: None)
    report = seed_database(adapter, force=True, out=lambda line: None)
    assert report.inserted == len(SAMPLE_TASKS)
    assert report.total == len(DEFAULT_TASKS) + len(SAMPLE_TASKS)


def test_reset_database(adapter):
    seed_database(adapter, out=lambda line: None)
    assert reset_database(adapter, out=lambda line: None)
    assert adapter.count() == 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLI Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_cli_seed_then_show(db_path, capsys):
    assert main(["--db", db_path, "seed"]) == 0
    out = capsys.readouterr().out
    assert "Seeded 4 initial tasks" in out
    assert "Database connection closed" in out

    assert main(["--db", db_path, "show", "--view", "list"]) == 0
    out = capsys.readouterr().out
    assert "Plan weekly meal prep" in out
    assert "Drop tasks here" not in out


def test_cli_seed_twice_keeps_four_rows(db_path):
    assert main(["--db", db_path, "seed"]) == 0
    assert main(["--db", db_path, "seed"]) == 0
    with SQLiteTaskAdapter(db_path) as db:
        assert db.count() == 4


def test_cli_reset(db_path, capsys):
    main(["--db", db_path, "seed"])
    assert main(["--db", db_path, "reset"]) == 0
    assert "all tasks removed" in capsys.readouterr().out
    with SQLiteTaskAdapter(db_path) as db:
        assert db.count() == 0


def test_cli_seed_fails_on_unopenable_db(tmp_path, capsys):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    assert main(["--db", str(blocker / "tasks.db"), "seed"]) == 1
    assert "Seeding failed" in capsys.readouterr().out


def test_cli_reset_fails_on_unopenable_db(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    assert main(["--db", str(blocker / "tasks.db"), "reset"]) == 1


def test_cli_closes_adapter(db_path, monkeypatch):
    opened = []
    real_init = SQLiteTaskAdapter.__init__

    def tracking_init(self, path):
        real_init(self, path)
        opened.append(self)

    monkeypatch.setattr(SQLiteTaskAdapter, "__init__", tracking_init)
    main(["--db", db_path, "seed"])
    assert opened and all(a.state == AdapterState.CLOSED for a in opened)


def test_cli_unknown_command():
    with pytest.raises(SystemExit) as exc:
        main(["explode"])
    assert exc.value.code == 2


def test_cli_bad_config(tmp_path, capsys):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("- just\n- a list\n")
    assert main(["--config", str(cfg), "show"]) == 1


def test_cli_db_flag_expands_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)

    assert main(["--db", "~/tasks.db", "seed"]) == 0
    assert (home / "tasks.db").exists()
    assert not (work / "~").exists()
