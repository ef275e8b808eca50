"""Files domain module - status lifecycle"""

from .file_status import (
    FileStatus,
    can_transition,
    get_allowed_transitions,
    parse_status,
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
)

__all__ = [
    "FileStatus",
    "can_transition",
    "get_allowed_transitions",
    "parse_status",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
]
