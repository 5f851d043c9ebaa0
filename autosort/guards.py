# autosort/guards.py
"""Event guards applied before any workflow is considered."""

import os
import pathlib


def check_event_path(file_path: str) -> str | None:
    """
    Check whether an event path should be ignored outright.
    Returns None if the path is OK, or a reason string.
    """
    name = pathlib.Path(file_path).name

    # Hidden files and editor backups / temp files
    if name.startswith("."):
        return "hidden_file"
    if name.endswith("~"):
        return "editor_temp_file"

    return None


def check_exists(file_path: str) -> str | None:
    """
    Return None if the event path is still a regular file, else a reason.

    Files often vanish between event emission and processing (moved by a
    prior workflow, deleted by the editor that wrote them).
    """
    if not os.path.exists(file_path):
        return "file_not_found"
    if not os.path.isfile(file_path):
        return "not_a_file"
    return None
