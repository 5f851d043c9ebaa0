# autosort/logger.py
"""Structured JSON-line logger for workflow and content-analysis events."""

import json
import pathlib
import logging
import threading
from datetime import datetime


class AutoSortLogger:
    """Writes structured log entries as JSON lines."""

    def __init__(self, log_path: str):
        self._log_path = pathlib.Path(log_path)
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

        # Also configure Python's logging for console output
        self._py_logger = logging.getLogger("autosort")
        self._py_logger.setLevel(logging.INFO)
        if not self._py_logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("[%(levelname)s] %(message)s")
            )
            self._py_logger.addHandler(handler)

    @property
    def log_path(self) -> pathlib.Path:
        return self._log_path

    def _write(self, entry: dict):
        """Append a JSON-line entry to the log file."""
        entry["timestamp"] = datetime.now().isoformat()
        with self._lock:
            with open(self._log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, default=str) + "\n")

    # -- Workflow engine --

    def log_workflow_result(self, result):
        """Log the outcome of one workflow execution attempt."""
        entry = {"action": "workflow_result", **result.to_dict()}
        self._write(entry)
        if result.success:
            self._py_logger.info(
                f"Workflow {result.workflow_name} ({result.workflow_id}) "
                f"completed for {result.file_path}"
            )
        else:
            self._py_logger.error(
                f"Workflow {result.workflow_name} ({result.workflow_id}) "
                f"failed for {result.file_path} -- {result.error}"
            )

    def log_workflow_skipped(self, file_path: str, reason: str, workflow_id: str | None = None):
        """Log an event or workflow that was filtered out before execution."""
        entry = {
            "action": "workflow_skipped",
            "file": file_path,
            "workflow_id": workflow_id,
            "reason": reason,
        }
        self._write(entry)
        self._py_logger.debug(
            f"Skipped: {file_path} (workflow={workflow_id}, reason={reason})"
        )

    def log_pattern_error(self, workflow_id: str, pattern: str, error: str):
        """Log a trigger pattern that failed to compile."""
        entry = {
            "action": "pattern_error",
            "workflow_id": workflow_id,
            "pattern": pattern,
            "error": error,
        }
        self._write(entry)
        self._py_logger.warning(
            f"Bad pattern for workflow {workflow_id}: {pattern!r} ({error})"
        )

    def log_action(self, action_type: str, file_path: str, detail: str):
        """Log a performed action (or a stand-in action that only logs)."""
        entry = {
            "action": "workflow_action",
            "type": action_type,
            "file": file_path,
            "detail": detail,
        }
        self._write(entry)
        self._py_logger.info(f"{action_type}: {detail}")

    def log_dry_run(self, action_type: str, file_path: str, detail: str):
        """Log the intended effect of an action in dry-run mode."""
        entry = {
            "action": "dry_run",
            "type": action_type,
            "file": file_path,
            "detail": detail,
        }
        self._write(entry)
        self._py_logger.info(f"[DRY RUN] {detail}")

    def log_workflow_change(self, change: str, workflow_id: str):
        """Log an add / update / delete of a workflow definition."""
        entry = {"action": "workflow_change", "change": change, "workflow_id": workflow_id}
        self._write(entry)
        self._py_logger.info(f"Workflow {change}: {workflow_id}")

    # -- Content analysis --

    def log_signature(self, file_path: str, signature_id: str, signature_type: str, mime_type: str):
        """Log a generated content signature."""
        entry = {
            "action": "content_signature",
            "file": file_path,
            "signature_id": signature_id,
            "signature_type": signature_type,
            "mime_type": mime_type,
        }
        self._write(entry)
        self._py_logger.debug(
            f"Signature for {file_path}: type={signature_type}, mime={mime_type}"
        )

    def log_related_files(self, file_path: str, checked: int, found: int):
        """Log a related-files search."""
        entry = {
            "action": "related_files",
            "file": file_path,
            "candidates_checked": checked,
            "relationships_found": found,
        }
        self._write(entry)
        self._py_logger.debug(
            f"Related files for {file_path}: {found} of {checked} candidates"
        )

    def log_classification(self, file_path: str, matches: list, cached: bool = False):
        """Log the classification matches produced (or reused) for a file."""
        entry = {
            "action": "classification",
            "file": file_path,
            "cached": cached,
            "matches": [
                {"classification_id": m.classification_id, "confidence": m.confidence}
                for m in matches
            ],
        }
        self._write(entry)
        self._py_logger.info(
            f"Classified {file_path}: {len(matches)} match(es)"
            + (" (cached)" if cached else "")
        )

    def log_content_group(self, group_id: str, name: str, member_count: int):
        """Log creation of a content group."""
        entry = {
            "action": "content_group",
            "group_id": group_id,
            "name": name,
            "member_count": member_count,
        }
        self._write(entry)
        self._py_logger.info(f"Created content group {name} with {member_count} member(s)")

    # -- General --

    def log_warning(self, message: str, **context):
        """Log a recoverable problem with its context."""
        entry = {"action": "warning", "message": message, **context}
        self._write(entry)
        self._py_logger.warning(message)

    def log_error(self, file_path: str, error: str):
        """Log an error during processing."""
        entry = {"action": "error", "file": file_path, "error": error}
        self._write(entry)
        self._py_logger.error(f"Error: {file_path} -- {error}")
