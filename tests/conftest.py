# tests/conftest.py
"""Shared fixtures: temp directories, a logger under tmp_path, an in-memory store."""

import pytest

from autosort.logger import AutoSortLogger
from autosort.models import Action, ActionType, Condition, Trigger, TriggerType, Workflow
from autosort.store import ContentStore


@pytest.fixture
def logger(tmp_path):
    return AutoSortLogger(str(tmp_path / "logs" / "autosort.log"))


@pytest.fixture
def store():
    """Memory-only content store seeded with the built-in classifications."""
    return ContentStore()


@pytest.fixture
def src_dir(tmp_path):
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path):
    path = tmp_path / "dest"
    path.mkdir()
    return path


@pytest.fixture
def fixed_mime(monkeypatch):
    """Force detect_mime to return a given type during signature generation."""
    def _set(mime_type: str):
        monkeypatch.setattr("autosort.signatures.detect_mime", lambda path: mime_type)
    return _set


def _make_workflow(
    workflow_id: str = "wf1",
    trigger_type: TriggerType = TriggerType.FILE_CREATED,
    pattern: str = "",
    actions: list[Action] | None = None,
    conditions: list[Condition] | None = None,
    enabled: bool = True,
) -> Workflow:
    return Workflow(
        id=workflow_id,
        name=f"Workflow {workflow_id}",
        trigger=Trigger(trigger_type, pattern),
        actions=actions if actions is not None else [Action(ActionType.TAG, "seen")],
        conditions=conditions or [],
        enabled=enabled,
    )


@pytest.fixture
def make_workflow():
    return _make_workflow
