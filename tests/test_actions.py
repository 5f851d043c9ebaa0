"""Tests for action execution, collision handling and dry-run mode."""

import json
import re
from datetime import datetime

import pytest

from autosort.actions import ActionExecutor, resolve_duplicate
from autosort.errors import ActionError
from autosort.models import Action, ActionType


def write(path, text="data"):
    path.write_text(text, encoding="utf-8")
    return path


def snapshot(root):
    """Relative path -> content for every file under *root*."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file() and p.suffix != ".log"
    }


class TestMoveCopyRename:

    def test_move_into_directory(self, src_dir, dest_dir, make_workflow):
        source = write(src_dir / "photo.jpg")
        workflow = make_workflow(actions=[Action(ActionType.MOVE, str(dest_dir))])

        result = ActionExecutor().execute_workflow(workflow, str(source))

        assert result.success
        assert result.message == "All actions completed successfully"
        assert (dest_dir / "photo.jpg").read_text() == "data"
        assert not source.exists()

    def test_move_without_target_dir_fails(self, src_dir, tmp_path, make_workflow):
        source = write(src_dir / "a.txt")
        missing = tmp_path / "nowhere"
        workflow = make_workflow(actions=[Action(ActionType.MOVE, str(missing))])

        result = ActionExecutor().execute_workflow(workflow, str(source))

        assert not result.success
        assert isinstance(result.error, ActionError)
        assert result.message.startswith("Failed to execute action:")
        assert source.exists()

    def test_move_creates_target_dir_when_asked(self, src_dir, tmp_path, make_workflow):
        source = write(src_dir / "a.txt")
        target = tmp_path / "new" / "dir"
        action = Action(ActionType.MOVE, str(target), {"createTargetDir": "true"})

        result = ActionExecutor().execute_workflow(make_workflow(actions=[action]), str(source))

        assert result.success
        assert (target / "a.txt").exists()

    def test_copy_keeps_source(self, src_dir, dest_dir, make_workflow):
        source = write(src_dir / "a.txt", "hello")
        workflow = make_workflow(actions=[Action(ActionType.COPY, str(dest_dir))])

        result = ActionExecutor().execute_workflow(workflow, str(source))

        assert result.success
        assert source.read_text() == "hello"
        assert (dest_dir / "a.txt").read_text() == "hello"

    def test_rename_stays_in_directory(self, src_dir, make_workflow):
        source = write(src_dir / "a.txt")
        workflow = make_workflow(actions=[Action(ActionType.RENAME, "b.txt")])

        result = ActionExecutor().execute_workflow(workflow, str(source))

        assert result.success
        assert (src_dir / "b.txt").exists()
        assert not source.exists()

    def test_later_actions_follow_moved_file(self, src_dir, dest_dir, make_workflow):
        source = write(src_dir / "a.txt")
        workflow = make_workflow(actions=[
            Action(ActionType.MOVE, str(dest_dir)),
            Action(ActionType.RENAME, "renamed.txt"),
        ])

        result = ActionExecutor().execute_workflow(workflow, str(source))

        assert result.success
        assert (dest_dir / "renamed.txt").exists()
        assert len(result.effects) == 2


class TestCollisions:

    def test_existing_target_gets_timestamp_suffix(self, src_dir, dest_dir, make_workflow):
        source = write(src_dir / "x.txt", "new")
        existing = write(dest_dir / "x.txt", "old")
        workflow = make_workflow(actions=[Action(ActionType.MOVE, str(dest_dir))])

        result = ActionExecutor().execute_workflow(workflow, str(source))

        assert result.success
        assert existing.read_text() == "old"
        others = [p.name for p in dest_dir.iterdir() if p.name != "x.txt"]
        assert len(others) == 1
        assert re.fullmatch(r"x_\d{8}_\d{6}(_\d+)?\.txt", others[0])

    def test_overwrite_replaces_target(self, src_dir, dest_dir, make_workflow):
        source = write(src_dir / "x.txt", "new")
        write(dest_dir / "x.txt", "old")
        action = Action(ActionType.MOVE, str(dest_dir), {"overwrite": "true"})

        result = ActionExecutor().execute_workflow(make_workflow(actions=[action]), str(source))

        assert result.success
        assert (dest_dir / "x.txt").read_text() == "new"
        assert [p.name for p in dest_dir.iterdir()] == ["x.txt"]

    def test_same_second_collision_adds_counter(self, dest_dir, monkeypatch):
        class FrozenDatetime(datetime):
            @classmethod
            def now(cls, tz=None):
                return cls(2024, 1, 2, 3, 4, 5)

        monkeypatch.setattr("autosort.actions.datetime", FrozenDatetime)
        write(dest_dir / "x.txt")

        first = resolve_duplicate(dest_dir / "x.txt")
        write(first)
        second = resolve_duplicate(dest_dir / "x.txt")

        assert first.name == "x_20240102_030405.txt"
        assert second.name == "x_20240102_030405_1.txt"

    @pytest.mark.parametrize("action_type,target", [
        (ActionType.MOVE, None),
        (ActionType.RENAME, "report.txt"),
        (ActionType.COPY, None),
    ])
    def test_destination_is_source_leaves_file_alone(self, src_dir, make_workflow, action_type, target):
        source = write(src_dir / "report.txt", "only copy")
        action = Action(action_type, target or str(src_dir), {"overwrite": "true"})

        result = ActionExecutor().execute_workflow(make_workflow(actions=[action]), str(source))

        assert result.success
        assert source.read_text() == "only copy"
        assert [p.name for p in src_dir.iterdir()] == ["report.txt"]
        assert "already at destination" in result.effects[0]

    def test_destination_is_source_without_overwrite(self, src_dir, make_workflow):
        source = write(src_dir / "report.txt")
        action = Action(ActionType.MOVE, str(src_dir))

        result = ActionExecutor().execute_workflow(make_workflow(actions=[action]), str(source))

        assert result.success
        assert [p.name for p in src_dir.iterdir()] == ["report.txt"]

    def test_missing_target_is_returned_unchanged(self, dest_dir):
        assert resolve_duplicate(dest_dir / "free.txt") == dest_dir / "free.txt"


class TestDryRun:

    def test_dry_run_changes_nothing(self, tmp_path, src_dir, dest_dir, make_workflow, logger):
        source = write(src_dir / "x.txt", "new")
        write(dest_dir / "x.txt", "old")
        workflow = make_workflow(actions=[
            Action(ActionType.COPY, str(tmp_path / "copies"), {"createTargetDir": "true"}),
            Action(ActionType.MOVE, str(dest_dir), {"overwrite": "true"}),
            Action(ActionType.RENAME, "y.txt"),
            Action(ActionType.TAG, "work"),
            Action(ActionType.EXECUTE, "echo hi"),
            Action(ActionType.DELETE),
        ])
        before = snapshot(tmp_path)

        result = ActionExecutor(dry_run=True, logger=logger).execute_workflow(workflow, str(source))

        assert result.success
        assert result.dry_run
        assert all(effect.startswith("Would ") for effect in result.effects)
        assert snapshot(tmp_path) == before
        assert not (tmp_path / "copies").exists()

    def test_dry_run_is_logged(self, src_dir, dest_dir, make_workflow, logger):
        source = write(src_dir / "a.txt")
        workflow = make_workflow(actions=[Action(ActionType.MOVE, str(dest_dir))])

        ActionExecutor(dry_run=True, logger=logger).execute_workflow(workflow, str(source))

        entries = [json.loads(line) for line in logger.log_path.read_text().splitlines()]
        assert entries[-1]["action"] == "dry_run"
        assert entries[-1]["type"] == "move"


class TestFailures:

    def test_partial_failure_is_not_rolled_back(self, src_dir, dest_dir, make_workflow, monkeypatch):
        source = write(src_dir / "photo.jpg")
        workflow = make_workflow(actions=[
            Action(ActionType.MOVE, str(dest_dir)),
            Action(ActionType.EXECUTE, "process"),
        ])
        executor = ActionExecutor()

        def failing_command(action, file_path):
            raise ActionError("command failed", action.type.value, file_path)

        monkeypatch.setattr(executor, "_execute_command", failing_command)

        result = executor.execute_workflow(workflow, str(source))

        assert not result.success
        assert str(result.error) == "command failed"
        assert result.error.file_path == str(dest_dir / "photo.jpg")
        assert (dest_dir / "photo.jpg").exists()
        assert not source.exists()
        assert len(result.effects) == 1

    def test_delete_missing_file_fails(self, src_dir, make_workflow):
        workflow = make_workflow(actions=[Action(ActionType.DELETE)])
        result = ActionExecutor().execute_workflow(workflow, str(src_dir / "gone.txt"))
        assert not result.success
        assert result.error.action_type == "delete"

    def test_execute_never_runs_a_process(self, src_dir, make_workflow, monkeypatch):
        import subprocess

        def forbidden(*args, **kwargs):
            pytest.fail("subprocess must not be used")

        monkeypatch.setattr(subprocess, "run", forbidden)
        monkeypatch.setattr(subprocess, "Popen", forbidden)
        source = write(src_dir / "a.txt")
        workflow = make_workflow(actions=[Action(ActionType.EXECUTE, "rm -rf /")])

        result = ActionExecutor().execute_workflow(workflow, str(source))

        assert result.success
        assert result.effects == [f"Command not run: rm -rf / (with file: {source})"]
