# autosort/detectors.py
"""File facts used by conditions and content analysis: extension, MIME type, stat metadata."""

import os
import pathlib
import magic


def detect_extension(file_path: str) -> str:
    """Return the lowercase file extension without the dot, e.g. 'pdf'."""
    return pathlib.Path(file_path).suffix.lower().lstrip(".")


def detect_mime(file_path: str) -> str:
    """Return the MIME type string detected from file content bytes."""
    return magic.from_file(file_path, mime=True)


def get_file_metadata(file_path: str) -> dict:
    """
    Stat a file for condition evaluation.

    Returns:
        {"file_size": int, "modified": float, "created": float}
        with times as epoch seconds.

    Raises OSError (FileNotFoundError included) when the file cannot be stat'ed.
    """
    stat = os.stat(file_path)
    return {
        "file_size": stat.st_size,
        "modified": stat.st_mtime,
        "created": stat.st_ctime,
    }
