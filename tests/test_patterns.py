"""Tests for glob compilation and trigger filtering."""

import pytest

from autosort.errors import PatternError
from autosort.models import EventOp, FileEvent, TriggerType
from autosort.patterns import compile_glob, match_glob
from autosort.rules import derive_trigger_type, evaluate_workflow, matches_trigger_type


class TestGlob:

    @pytest.mark.parametrize("pattern,path", [
        ("*.jpg", "/src/photo.jpg"),
        ("/src/*", "/src/a/b/c.txt"),
        ("/src/file?.txt", "/src/file1.txt"),
        ("/src/[abc].txt", "/src/b.txt"),
        ("/src/[a-c].txt", "/src/c.txt"),
        ("/src/[!abc].txt", "/src/d.txt"),
        ("*.{jpg,png}", "/x/y.png"),
        ("*.{jp{e,}g,png}", "/x/y.jpeg"),
        (r"/src/\*.txt", "/src/*.txt"),
        ("/src/a.b", "/src/a.b"),
    ])
    def test_matches(self, pattern, path):
        assert match_glob(pattern, path)

    @pytest.mark.parametrize("pattern,path", [
        ("*.jpg", "/src/photo.jpeg"),
        ("/src/file?.txt", "/src/file10.txt"),
        ("/src/[!abc].txt", "/src/a.txt"),
        ("*.{jpg,png}", "/x/y.gif"),
        ("/src/a.b", "/src/axb"),
        ("photo.jpg", "/src/photo.jpg"),
    ])
    def test_does_not_match(self, pattern, path):
        assert not match_glob(pattern, path)

    @pytest.mark.parametrize("pattern", ["*.{jpg", "[abc", "file\\", "[]"])
    def test_bad_pattern_raises(self, pattern):
        with pytest.raises(PatternError) as exc:
            compile_glob(pattern)
        assert exc.value.pattern == pattern

    def test_stray_brace_is_literal(self):
        assert match_glob("a}b", "a}b")


class TestTriggerFiltering:

    def test_event_ops_map_to_trigger_types(self):
        assert derive_trigger_type(FileEvent("/a", EventOp.CREATE)) == TriggerType.FILE_CREATED
        assert derive_trigger_type(FileEvent("/a", EventOp.WRITE)) == TriggerType.FILE_MODIFIED
        assert derive_trigger_type(FileEvent("/a", EventOp.OTHER)) is None

    def test_pattern_match_trigger_accepts_create_and_write(self, make_workflow):
        workflow = make_workflow(trigger_type=TriggerType.FILE_PATTERN_MATCH)
        assert matches_trigger_type(workflow, TriggerType.FILE_CREATED)
        assert matches_trigger_type(workflow, TriggerType.FILE_MODIFIED)

    def test_created_trigger_ignores_write(self, make_workflow):
        workflow = make_workflow(trigger_type=TriggerType.FILE_CREATED)
        triggered, reason = evaluate_workflow(workflow, FileEvent("/a.txt", EventOp.WRITE), {})
        assert (triggered, reason) == (False, "trigger_type")

    @pytest.mark.parametrize("trigger_type", [TriggerType.MANUAL, TriggerType.SCHEDULED])
    def test_manual_and_scheduled_never_fire_on_events(self, make_workflow, trigger_type):
        workflow = make_workflow(trigger_type=trigger_type)
        for op in (EventOp.CREATE, EventOp.WRITE):
            triggered, _ = evaluate_workflow(workflow, FileEvent("/a.txt", op), {})
            assert not triggered

    def test_disabled_is_reported_first(self, make_workflow):
        workflow = make_workflow(enabled=False)
        assert evaluate_workflow(workflow, FileEvent("/a", EventOp.CREATE), {}) == (False, "disabled")

    def test_pattern_applies_to_created_trigger(self, make_workflow):
        workflow = make_workflow(pattern="*.jpg")
        event = FileEvent("/src/notes.txt", EventOp.CREATE)
        assert evaluate_workflow(workflow, event, {}) == (False, "pattern")

    def test_empty_pattern_matches_everything(self, make_workflow):
        workflow = make_workflow(trigger_type=TriggerType.FILE_PATTERN_MATCH)
        event = FileEvent("/src/anything.bin", EventOp.WRITE)
        assert evaluate_workflow(workflow, event, {}) == (True, "triggered")

    def test_bad_pattern_propagates(self, make_workflow):
        workflow = make_workflow(pattern="{oops")
        with pytest.raises(PatternError):
            evaluate_workflow(workflow, FileEvent("/a", EventOp.CREATE), {})
