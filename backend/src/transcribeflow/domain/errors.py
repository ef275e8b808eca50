"""Domain error taxonomy.

Every workflow and directory failure is one of these types. They are raised
synchronously to the caller and mapped to HTTP responses in ``main``.

- ValidationError: malformed or missing input; the caller can fix and retry
- Forbidden: the actor lacks the role or ownership the action needs
- InvalidState: the transition is illegal from the file's current status
- NotFound: the referenced file or user id does not exist
- Conflict: a unique value such as an email is already taken
- StoreError: the persistence layer failed; propagated without recovery
"""

from typing import Optional


class WorkflowError(Exception):
    """Base class for all domain failures."""

    code = "workflow_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(WorkflowError):
    code = "validation_error"


class Forbidden(WorkflowError):
    code = "forbidden"


class InvalidState(WorkflowError):
    """Raised when a transition is not allowed from the current status.

    ``current_status`` is reported back so callers can refresh their view.
    """

    code = "invalid_state"

    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status


class NotFound(WorkflowError):
    code = "not_found"


class StoreError(WorkflowError):
    code = "store_error"


class Conflict(WorkflowError):
    """Raised when a write collides with an existing unique record."""

    code = "conflict"
