# autosort/dispatcher.py
"""Workflow manager: owns the workflow list and dispatches file events through it."""

import threading

from autosort.actions import ActionExecutor
from autosort.detectors import get_file_metadata
from autosort.errors import (
    ConditionsNotMetError,
    PatternError,
    WorkflowNotFoundError,
    WorkflowValidationError,
)
from autosort.guards import check_event_path, check_exists
from autosort.conditions import evaluate_conditions
from autosort.models import FileEvent, Workflow, WorkflowResult
from autosort.rules import evaluate_workflow


def validate_workflow(workflow: Workflow):
    """Raise WorkflowValidationError unless the workflow has an ID, a name and an action."""
    if not workflow.id:
        raise WorkflowValidationError("workflow ID is required")
    if "/" in workflow.id or "\\" in workflow.id or ".." in workflow.id:
        raise WorkflowValidationError(f"workflow ID {workflow.id!r} must not contain path separators or '..'")
    if not workflow.name:
        raise WorkflowValidationError("workflow name is required")
    if not workflow.actions:
        raise WorkflowValidationError("workflow must have at least one action")


class WorkflowManager:
    """
    Holds the enabled/disabled workflow list and runs events through it.

    Edits take the lock, persist first and only then replace the in-memory
    list, so a failed write leaves memory untouched. Event processing works
    on a snapshot taken under the same lock.
    """

    def __init__(self, store=None, logger=None, dry_run: bool = False):
        self._store = store
        self._logger = logger
        self._lock = threading.Lock()
        self._workflows: tuple[Workflow, ...] = ()
        self._executor = ActionExecutor(dry_run=dry_run, logger=logger)

    # -- Workflow list --

    def load_workflows(self):
        """Replace the in-memory list with what the store holds."""
        if self._store is None:
            return
        loaded = self._store.load_all()
        for workflow in loaded:
            validate_workflow(workflow)
        with self._lock:
            self._workflows = tuple(loaded)

    def get_workflows(self) -> list[Workflow]:
        with self._lock:
            return list(self._workflows)

    def get_workflow(self, workflow_id: str) -> Workflow:
        for workflow in self.get_workflows():
            if workflow.id == workflow_id:
                return workflow
        raise WorkflowNotFoundError(workflow_id)

    def add_workflow(self, workflow: Workflow):
        validate_workflow(workflow)
        with self._lock:
            if any(w.id == workflow.id for w in self._workflows):
                raise WorkflowValidationError(
                    f"workflow with ID {workflow.id} already exists"
                )
            if self._store is not None:
                self._store.save(workflow)
            self._workflows = self._workflows + (workflow,)
        if self._logger:
            self._logger.log_workflow_change("added", workflow.id)

    def update_workflow(self, workflow: Workflow):
        validate_workflow(workflow)
        with self._lock:
            index = next(
                (i for i, w in enumerate(self._workflows) if w.id == workflow.id), None
            )
            if index is None:
                raise WorkflowNotFoundError(workflow.id)
            if self._store is not None:
                self._store.save(workflow)
            updated = list(self._workflows)
            updated[index] = workflow
            self._workflows = tuple(updated)
        if self._logger:
            self._logger.log_workflow_change("updated", workflow.id)

    def delete_workflow(self, workflow_id: str):
        with self._lock:
            if not any(w.id == workflow_id for w in self._workflows):
                raise WorkflowNotFoundError(workflow_id)
            if self._store is not None:
                self._store.delete(workflow_id)
            self._workflows = tuple(w for w in self._workflows if w.id != workflow_id)
        if self._logger:
            self._logger.log_workflow_change("deleted", workflow_id)

    # -- Dry run --

    def set_dry_run(self, enabled: bool):
        self._executor.dry_run = enabled

    def is_dry_run(self) -> bool:
        return self._executor.dry_run

    # -- Dispatch --

    def _skip(self, file_path: str, reason: str, workflow_id: str | None = None):
        if self._logger:
            self._logger.log_workflow_skipped(file_path, reason, workflow_id)

    def process_event(self, event: FileEvent) -> tuple[bool, Exception | None]:
        """
        Run one file event through every workflow, in list order.

        Returns:
            (processed, error) - processed is True once any workflow has
            executed. The first failing workflow ends the iteration and its
            error is returned; later workflows do not run for this event.
        """
        file_path = event.path

        reason = check_event_path(file_path)
        if reason:
            self._skip(file_path, reason)
            return False, None

        reason = check_exists(file_path)
        if reason:
            self._skip(file_path, reason)
            return False, None

        try:
            metadata = get_file_metadata(file_path)
        except FileNotFoundError:
            self._skip(file_path, "file_not_found")
            return False, None

        with self._lock:
            snapshot = self._workflows

        processed = False
        for workflow in snapshot:
            if processed:
                # An earlier workflow may have moved or deleted the file
                try:
                    metadata = get_file_metadata(file_path)
                except FileNotFoundError:
                    self._skip(file_path, "file_not_found", workflow.id)
                    break
            try:
                triggered, reason = evaluate_workflow(workflow, event, metadata)
            except PatternError as e:
                if self._logger:
                    self._logger.log_pattern_error(workflow.id, workflow.trigger.pattern, str(e))
                continue

            if not triggered:
                if reason != "disabled":
                    self._skip(file_path, reason, workflow.id)
                continue

            result = self._executor.execute_workflow(workflow, file_path)
            processed = True
            if self._logger:
                self._logger.log_workflow_result(result)
            if not result.success:
                return True, result.error

        return processed, None

    def execute_workflow(self, workflow_id: str, file_path: str) -> WorkflowResult:
        """
        Run one workflow against a file on demand.

        Trigger type and pattern are not checked; conditions are.

        Raises WorkflowNotFoundError, FileNotFoundError or ConditionsNotMetError.
        """
        workflow = self.get_workflow(workflow_id)
        metadata = get_file_metadata(file_path)

        if not evaluate_conditions(workflow.conditions, file_path, metadata):
            raise ConditionsNotMetError(
                f"file does not meet workflow conditions: {file_path}"
            )

        result = self._executor.execute_workflow(workflow, file_path)
        if self._logger:
            self._logger.log_workflow_result(result)
        return result
