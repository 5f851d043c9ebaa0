# autosort/workflow_store.py
"""Persist workflow definitions as one JSON file per workflow."""

import json
import pathlib

from autosort.errors import ConfigError
from autosort.models import Workflow


class WorkflowStore:
    """Reads and writes ``<id>.json`` files under the workflows directory."""

    def __init__(self, workflows_path: str):
        self._root = pathlib.Path(workflows_path)

    @property
    def root(self) -> pathlib.Path:
        return self._root

    def path_for(self, workflow_id: str) -> pathlib.Path:
        return self._root / f"{workflow_id}.json"

    def load_all(self) -> list[Workflow]:
        """
        Load every workflow file, ordered by file name.

        Raises ConfigError naming the file on unreadable or malformed JSON.
        """
        self._root.mkdir(parents=True, exist_ok=True)
        workflows = []
        for item in sorted(self._root.iterdir()):
            if not item.is_file() or item.suffix != ".json":
                continue
            try:
                data = json.loads(item.read_text(encoding="utf-8"))
                workflows.append(Workflow.from_dict(data))
            except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
                raise ConfigError(f"failed to parse workflow file {item}: {e}") from e
        return workflows

    def save(self, workflow: Workflow):
        """Write one workflow file, replacing any previous version."""
        self._root.mkdir(parents=True, exist_ok=True)
        target = self.path_for(workflow.id)
        tmp = target.with_suffix(".json.tmp")
        tmp.write_text(
            json.dumps(workflow.to_dict(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        tmp.replace(target)

    def delete(self, workflow_id: str):
        """Remove a workflow file; a missing file is not an error."""
        self.path_for(workflow_id).unlink(missing_ok=True)
