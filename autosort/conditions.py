# autosort/conditions.py
"""Evaluate workflow conditions against file metadata."""

import pathlib
import re
import time

from autosort.detectors import detect_extension
from autosort.models import Condition, ConditionType, Operator


_SIZE_UNITS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}

_AGE_UNITS = {
    "minutes": 60,
    "hours": 3600,
    "days": 86400,
}

_INT_RE = re.compile(r"[+-]?\d+")


def _parse_int(value: str) -> int | None:
    """Strict base-10 integer parse; None on anything else."""
    if not _INT_RE.fullmatch(value or ""):
        return None
    return int(value)


def _parse_float(value: str) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _compare_numbers(operator, actual, target) -> bool:
    if operator == Operator.EQUALS:
        return actual == target
    if operator == Operator.NOT_EQUALS:
        return actual != target
    if operator == Operator.GREATER_THAN:
        return actual > target
    if operator == Operator.LESS_THAN:
        return actual < target
    return False


def evaluate_file_size(condition: Condition, metadata: dict) -> bool:
    """Compare the file size against value * unit (KB/MB/GB)."""
    target = _parse_int(condition.value)
    if target is None:
        return False
    target *= _SIZE_UNITS.get(condition.value_unit.upper(), 1)
    return _compare_numbers(condition.operator, metadata["file_size"], target)


def evaluate_file_name(condition: Condition, file_path: str) -> bool:
    """Compare the file's base name against the condition value."""
    name = pathlib.Path(file_path).name
    value = condition.value
    op = condition.operator

    if op == Operator.EQUALS:
        return name == value
    if op == Operator.NOT_EQUALS:
        return name != value
    if op == Operator.CONTAINS:
        return value in name
    if op == Operator.STARTS_WITH:
        return name.startswith(value)
    if op == Operator.ENDS_WITH:
        return name.endswith(value)
    if op == Operator.MATCHES_REGEX:
        try:
            return re.search(value, name) is not None
        except re.error:
            return False
    return False


def evaluate_file_type(condition: Condition, file_path: str) -> bool:
    """Compare the lowercase extension (no dot) against the condition value."""
    ext = detect_extension(file_path)
    op = condition.operator

    if op == Operator.EQUALS:
        return ext == condition.value
    if op == Operator.NOT_EQUALS:
        return ext != condition.value
    if op == Operator.CONTAINS:
        return condition.value in ext
    return False


def evaluate_file_age(condition: Condition, metadata: dict, now: float | None = None) -> bool:
    """
    Compare seconds since last modification against value * unit.

    Equals / NotEquals on an elapsed float almost never hold; they are
    supported as declared and left fragile.
    """
    target = _parse_float(condition.value)
    if target is None:
        return False
    target *= _AGE_UNITS.get(condition.value_unit.lower(), 1)

    current = time.time() if now is None else now
    age = current - metadata["modified"]
    return _compare_numbers(condition.operator, age, target)


def evaluate_condition(condition: Condition, file_path: str, metadata: dict) -> bool:
    """Evaluate one condition; unknown types and malformed values yield False."""
    ctype = condition.type
    if ctype == ConditionType.FILE_SIZE:
        return evaluate_file_size(condition, metadata)
    if ctype == ConditionType.FILE_NAME:
        return evaluate_file_name(condition, file_path)
    if ctype == ConditionType.FILE_TYPE:
        return evaluate_file_type(condition, file_path)
    if ctype == ConditionType.FILE_AGE:
        return evaluate_file_age(condition, metadata)
    return False


def evaluate_conditions(conditions: list[Condition], file_path: str, metadata: dict) -> bool:
    """AND all conditions together; an empty list always matches."""
    return all(evaluate_condition(c, file_path, metadata) for c in conditions)
