# autosort/errors.py
"""Exception types raised by the workflow engine and the content subsystem."""


class AutoSortError(Exception):
    """Base class for all AutoSort errors."""
    pass


class ConfigError(AutoSortError):
    """Raised when a configuration file cannot be read or parsed."""
    pass


class WorkflowValidationError(AutoSortError):
    """Raised when a workflow definition is incomplete or collides with another."""
    pass


class WorkflowNotFoundError(AutoSortError):
    """Raised when no workflow exists for the requested ID."""

    def __init__(self, workflow_id: str):
        super().__init__(f"workflow with ID {workflow_id} not found")
        self.workflow_id = workflow_id


class ConditionsNotMetError(AutoSortError):
    """Raised by manual execution when the file fails the workflow's conditions."""
    pass


class PatternError(AutoSortError):
    """Raised when a trigger glob pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid glob pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class ActionError(AutoSortError):
    """Raised when a single workflow action fails."""

    def __init__(self, message: str, action_type: str, file_path: str):
        super().__init__(message)
        self.action_type = action_type
        self.file_path = file_path


# Kinds carried by AnalysisError
FILE_NOT_FOUND = "file_not_found"
INVALID_OPERATION = "invalid_operation"
FILE_OPERATION_FAILED = "file_operation_failed"


class AnalysisError(AutoSortError):
    """Raised when a content signature cannot be produced or compared."""

    def __init__(self, message: str, path: str = "", kind: str = FILE_OPERATION_FAILED):
        self.message = message
        self.path = path
        self.kind = kind
        if path:
            super().__init__(f"{message}: {path}")
        else:
            super().__init__(message)


class RepositoryError(AutoSortError):
    """
    Raised by the content store.

    Context key-value pairs (operation name, file path, record ID) are kept
    on the exception and rendered into the message.
    """

    def __init__(self, message: str, **context):
        self.message = message
        self.context = context
        if context:
            details = " ".join(f"{k}={v}" for k, v in context.items())
            super().__init__(f"{message} ({details})")
        else:
            super().__init__(message)
