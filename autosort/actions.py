# autosort/actions.py
"""Execute a workflow's actions against a file, honoring dry-run mode."""

import os
import pathlib
import shutil
from datetime import datetime

from autosort.errors import ActionError
from autosort.models import Action, ActionType, Workflow, WorkflowResult


def resolve_duplicate(target: pathlib.Path) -> pathlib.Path:
    """
    If the target path already exists, append a timestamp suffix
    to make the filename unique.
    """
    if not target.exists():
        return target

    stem = target.stem
    suffix = target.suffix
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    new_target = target.parent / f"{stem}_{timestamp}{suffix}"

    # Extremely rare: same-second collision
    counter = 1
    while new_target.exists():
        new_target = target.parent / f"{stem}_{timestamp}_{counter}{suffix}"
        counter += 1

    return new_target


def _is_same_file(target: pathlib.Path, file_path: str) -> bool:
    try:
        return target.exists() and os.path.samefile(target, file_path)
    except OSError:
        return False


class ActionExecutor:
    """
    Runs actions in order and stops at the first failure.

    Nothing is rolled back: actions that completed before a failure stay
    done. Move and rename hand the file's new path to the actions after them.
    """

    _HANDLERS = {
        ActionType.MOVE: "_execute_move",
        ActionType.COPY: "_execute_copy",
        ActionType.RENAME: "_execute_rename",
        ActionType.TAG: "_execute_tag",
        ActionType.DELETE: "_execute_delete",
        ActionType.EXECUTE: "_execute_command",
    }

    def __init__(self, dry_run: bool = False, logger=None):
        self.dry_run = dry_run
        self.logger = logger

    def execute_workflow(self, workflow: Workflow, file_path: str) -> WorkflowResult:
        """Run every action of *workflow* against *file_path*."""
        result = WorkflowResult(
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            file_path=file_path,
            dry_run=self.dry_run,
        )

        current = file_path
        for action in workflow.actions:
            try:
                current, effect = self.execute_action(action, current)
            except ActionError as e:
                result.success = False
                result.error = e
                result.message = f"Failed to execute action: {e}"
                return result
            result.effects.append(effect)

        result.message = "All actions completed successfully"
        return result

    def execute_action(self, action: Action, file_path: str) -> tuple[str, str]:
        """
        Perform one action.

        Returns:
            (path_of_file_afterwards, effect_description)

        Raises ActionError on failure.
        """
        handler_name = self._HANDLERS.get(action.type)
        if handler_name is None:
            raise ActionError(
                f"unsupported action type: {action.type}", str(action.type), file_path
            )
        return getattr(self, handler_name)(action, file_path)

    # -- Helpers --

    def _report(self, action: Action, file_path: str, detail: str):
        if not self.logger:
            return
        if self.dry_run:
            self.logger.log_dry_run(action.type.value, file_path, detail)
        else:
            self.logger.log_action(action.type.value, file_path, detail)

    def _collision_target(self, action: Action, target: pathlib.Path) -> tuple[pathlib.Path, bool]:
        """
        Apply the destination-collision policy.

        Returns:
            (final_target, replaces_existing)
        """
        if not target.exists():
            return target, False
        if action.option_enabled("overwrite"):
            return target, True
        return resolve_duplicate(target), False

    def _transfer(self, action: Action, file_path: str, verb: str, target: pathlib.Path,
                  create_dir: pathlib.Path | None) -> tuple[pathlib.Path, str]:
        """Shared body of move / copy / rename."""
        if _is_same_file(target, file_path):
            # Destination is the source itself: nothing to remove, rename or copy
            detail = f"leave file {file_path} in place (already at destination)"
            detail = f"Would {detail}" if self.dry_run else detail[0].upper() + detail[1:]
            self._report(action, file_path, detail)
            return pathlib.Path(file_path), detail

        final, replaces = self._collision_target(action, target)
        detail = f"{verb} file from {file_path} to {final}"
        if replaces:
            detail += " (overwriting existing file)"

        if self.dry_run:
            detail = f"Would {detail}"
            self._report(action, file_path, detail)
            return final, detail

        try:
            if create_dir is not None:
                create_dir.mkdir(parents=True, exist_ok=True)
            if replaces:
                os.remove(final)
            if verb == "copy":
                shutil.copyfile(file_path, final)
            else:
                shutil.move(file_path, str(final))
        except OSError as e:
            raise ActionError(
                f"failed to {verb} file: {e}", action.type.value, file_path
            ) from e

        detail = detail[0].upper() + detail[1:]
        self._report(action, file_path, detail)
        return final, detail

    # -- Handlers --

    def _execute_move(self, action: Action, file_path: str) -> tuple[str, str]:
        dest_dir = pathlib.Path(action.target)
        create = dest_dir if action.option_enabled("createTargetDir") else None
        target = dest_dir / pathlib.Path(file_path).name
        final, detail = self._transfer(action, file_path, "move", target, create)
        return str(final), detail

    def _execute_copy(self, action: Action, file_path: str) -> tuple[str, str]:
        dest_dir = pathlib.Path(action.target)
        create = dest_dir if action.option_enabled("createTargetDir") else None
        target = dest_dir / pathlib.Path(file_path).name
        _, detail = self._transfer(action, file_path, "copy", target, create)
        return file_path, detail

    def _execute_rename(self, action: Action, file_path: str) -> tuple[str, str]:
        target = pathlib.Path(file_path).parent / action.target
        final, detail = self._transfer(action, file_path, "rename", target, None)
        return str(final), detail

    def _execute_tag(self, action: Action, file_path: str) -> tuple[str, str]:
        # No tag store yet: tagging is reported, nothing is persisted
        if self.dry_run:
            detail = f"Would add tag '{action.target}' to file {file_path}"
        else:
            detail = f"Added tag '{action.target}' to file {file_path}"
        self._report(action, file_path, detail)
        return file_path, detail

    def _execute_delete(self, action: Action, file_path: str) -> tuple[str, str]:
        if self.dry_run:
            detail = f"Would delete file {file_path}"
            self._report(action, file_path, detail)
            return file_path, detail
        try:
            os.remove(file_path)
        except OSError as e:
            raise ActionError(
                f"failed to delete file: {e}", action.type.value, file_path
            ) from e
        detail = f"Deleted file {file_path}"
        self._report(action, file_path, detail)
        return file_path, detail

    def _execute_command(self, action: Action, file_path: str) -> tuple[str, str]:
        # Commands are never spawned; the command line is only reported
        if self.dry_run:
            detail = f"Would execute command: {action.target} (with file: {file_path})"
        else:
            detail = f"Command not run: {action.target} (with file: {file_path})"
        self._report(action, file_path, detail)
        return file_path, detail
