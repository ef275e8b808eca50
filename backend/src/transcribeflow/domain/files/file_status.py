"""FileStatus state machine for the transcription lifecycle.

State flow:
    PENDING → IN_PROGRESS → APPROVAL → COMPLETED or REJECTED

COMPLETED and REJECTED are terminal. Drafts saved while IN_PROGRESS do not
change status, so there are no self-transitions in the table.
"""

from enum import Enum
from typing import Optional, Dict, List


class FileStatus(str, Enum):
    """File workflow status enum

    Values are persisted verbatim and compared case-sensitively.
    """
    PENDING = "pending"           # Uploaded, waiting for a transcriber
    IN_PROGRESS = "in_progress"   # Claimed, drafts being saved
    APPROVAL = "approval"         # Submitted, waiting for an admin
    COMPLETED = "completed"       # Approved (terminal)
    REJECTED = "rejected"         # Rejected (terminal)


# State transition rules
ALLOWED_TRANSITIONS: Dict[Optional[FileStatus], List[FileStatus]] = {
    None: [FileStatus.PENDING],
    FileStatus.PENDING: [FileStatus.IN_PROGRESS],
    FileStatus.IN_PROGRESS: [FileStatus.APPROVAL],
    FileStatus.APPROVAL: [FileStatus.COMPLETED, FileStatus.REJECTED],
    FileStatus.COMPLETED: [],
    FileStatus.REJECTED: [],
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items()
    if status is not None and not targets
)


def can_transition(from_status: Optional[FileStatus], to_status: FileStatus) -> bool:
    """Validate if status transition is allowed

    Args:
        from_status: Current status (None for new files)
        to_status: Target status

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(FileStatus.PENDING, FileStatus.IN_PROGRESS)
        True
        >>> can_transition(FileStatus.COMPLETED, FileStatus.APPROVAL)
        False
    """
    allowed = ALLOWED_TRANSITIONS.get(from_status, [])
    return to_status in allowed


def get_allowed_transitions(from_status: Optional[FileStatus]) -> List[FileStatus]:
    return ALLOWED_TRANSITIONS.get(from_status, [])


def parse_status(value: str) -> FileStatus:
    """Parse a persisted or user-supplied status string.

    Raises:
        ValueError: If the value is not one of the enumerated statuses
    """
    return FileStatus(value)
