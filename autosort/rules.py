# autosort/rules.py
"""Decide which workflows a file-system event triggers."""

from autosort.conditions import evaluate_conditions
from autosort.models import EventOp, FileEvent, TriggerType, Workflow
from autosort.patterns import compile_glob


_EVENT_TRIGGERS = {
    EventOp.CREATE: TriggerType.FILE_CREATED,
    EventOp.WRITE: TriggerType.FILE_MODIFIED,
}


def derive_trigger_type(event: FileEvent) -> TriggerType | None:
    """Map an event op to its trigger type; None for ops that never trigger."""
    return _EVENT_TRIGGERS.get(event.op)


def matches_trigger_type(workflow: Workflow, trigger_type: TriggerType) -> bool:
    """
    True when the workflow is a candidate for an event of *trigger_type*.

    Pattern-match triggers accept both created and modified events.
    """
    wtype = workflow.trigger.type
    if wtype == trigger_type:
        return True
    return wtype == TriggerType.FILE_PATTERN_MATCH and trigger_type in (
        TriggerType.FILE_CREATED,
        TriggerType.FILE_MODIFIED,
    )


def matches_pattern(workflow: Workflow, file_path: str) -> bool:
    """
    Match the trigger's glob against the full path; an empty pattern matches.

    Raises PatternError when the pattern does not compile.
    """
    pattern = workflow.trigger.pattern
    if not pattern:
        return True
    return compile_glob(pattern).fullmatch(file_path) is not None


def evaluate_workflow(
    workflow: Workflow,
    event: FileEvent,
    metadata: dict,
) -> tuple[bool, str]:
    """
    Run the type, pattern and condition filters for one workflow.

    Returns:
        (triggered, reason) where reason names the stage that rejected the
        workflow ("disabled", "trigger_type", "pattern", "conditions") or is
        "triggered".

    PatternError propagates so the caller can log it and move on.
    """
    if not workflow.enabled:
        return False, "disabled"

    trigger_type = derive_trigger_type(event)
    if trigger_type is None or not matches_trigger_type(workflow, trigger_type):
        return False, "trigger_type"

    if not matches_pattern(workflow, event.path):
        return False, "pattern"

    if not evaluate_conditions(workflow.conditions, event.path, metadata):
        return False, "conditions"

    return True, "triggered"
