"""File workflow engine.

Decides whether an actor may perform an operation on a file and computes the
resulting mutation. The engine is stateless and performs no I/O: each
operation takes ``(actor, file, input)`` and either returns a typed command
(see ``commands``) or raises a domain error.

Operation table:

┌─────────────┬──────────────────────────────────────────────┬─────────────────────────┐
│ Operation   │ Precondition                                 │ Effect                  │
├─────────────┼──────────────────────────────────────────────┼─────────────────────────┤
│ create      │ title and source reference present           │ new pending file        │
│ claim       │ pending, unclaimed, actor is regular         │ in_progress, owner set  │
│ save_draft  │ in_progress, actor is owner                  │ text replaced           │
│ submit      │ in_progress, actor is owner, text non-empty  │ approval, text final    │
│ approve     │ actor is admin, approval                     │ completed               │
│ reject      │ actor is admin, approval                     │ rejected                │
│ edit_title  │ actor is admin, title non-empty              │ title replaced          │
│ delete      │ actor is admin                               │ file removed            │
└─────────────┴──────────────────────────────────────────────┴─────────────────────────┘

The per-file guards below are the whole authorization model: both the
operations and ``actions_available_to`` evaluate the same predicates.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, Optional

from ..errors import Forbidden, InvalidState, ValidationError
from ..files.file_status import FileStatus, can_transition
from ..users.roles import UserRole
from .actor import Actor
from .commands import (
    ApproveFile,
    ClaimFile,
    CreateFile,
    DeleteFile,
    FileRecord,
    RejectFile,
    RenameFile,
    SaveDraft,
    SubmitFile,
)

# Matches files.title VARCHAR(100)
MAX_TITLE_LENGTH = 100


class WorkflowAction(str, Enum):
    """Per-file operations reported by ``actions_available_to``."""
    CLAIM = "claim"
    SAVE_DRAFT = "save_draft"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    EDIT_TITLE = "edit_title"
    DELETE = "delete"


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


# =============================================================================
# GUARDS
# =============================================================================

def _require_admin(actor: Actor, what: str) -> None:
    if actor.role is not UserRole.ADMIN:
        raise Forbidden(f"Only administrators can {what}")


def _require_transition(file: FileRecord, target: FileStatus) -> None:
    if not can_transition(file.status, target):
        raise InvalidState(
            f"File {file.id} cannot move from {file.status.value} to {target.value}",
            current_status=file.status.value,
        )


def _check_claim(actor: Actor, file: FileRecord) -> None:
    # Status first: a second claim on the same file is a state error for everyone
    _require_transition(file, FileStatus.IN_PROGRESS)
    if actor.role is not UserRole.REGULAR:
        raise Forbidden("Only regular users can claim files")
    if file.responsible_by is not None:
        raise Forbidden(f"File {file.id} is already claimed")


def _check_transcriber(actor: Actor, file: FileRecord) -> None:
    if file.responsible_by is None or file.responsible_by != actor.id:
        raise Forbidden(f"Only the user who claimed file {file.id} can transcribe it")
    if file.status is not FileStatus.IN_PROGRESS:
        raise InvalidState(
            f"File {file.id} is not being transcribed (status: {file.status.value})",
            current_status=file.status.value,
        )


def _check_approve(actor: Actor, file: FileRecord) -> None:
    _require_admin(actor, "approve transcriptions")
    _require_transition(file, FileStatus.COMPLETED)


def _check_reject(actor: Actor, file: FileRecord) -> None:
    _require_admin(actor, "reject transcriptions")
    _require_transition(file, FileStatus.REJECTED)


def _check_edit_title(actor: Actor, file: FileRecord) -> None:
    _require_admin(actor, "rename files")


def _check_delete(actor: Actor, file: FileRecord) -> None:
    _require_admin(actor, "delete files")


_GUARDS: Dict[WorkflowAction, Callable[[Actor, FileRecord], None]] = {
    WorkflowAction.CLAIM: _check_claim,
    WorkflowAction.SAVE_DRAFT: _check_transcriber,
    WorkflowAction.SUBMIT: _check_transcriber,
    WorkflowAction.APPROVE: _check_approve,
    WorkflowAction.REJECT: _check_reject,
    WorkflowAction.EDIT_TITLE: _check_edit_title,
    WorkflowAction.DELETE: _check_delete,
}


def _clean_title(title: Optional[str]) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title is required")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
    return cleaned


# =============================================================================
# OPERATIONS
# =============================================================================

def create(
    actor: Actor,
    title: Optional[str],
    source_ref: Optional[str],
    now: Optional[datetime] = None,
) -> CreateFile:
    """Register an uploaded file as pending. Any role may upload.

    Raises:
        ValidationError: If the title or the source reference is missing
    """
    cleaned_title = _clean_title(title)
    cleaned_ref = (source_ref or "").strip()
    if not cleaned_ref:
        raise ValidationError("A source file reference is required")

    return CreateFile(
        title=cleaned_title,
        source_ref=cleaned_ref,
        created_by=actor.id,
        created_at=_now(now),
    )


def claim(actor: Actor, file: FileRecord, now: Optional[datetime] = None) -> ClaimFile:
    """Take ownership of a pending file.

    Raises:
        InvalidState: If the file is not pending
        Forbidden: If the actor is not a regular user or the file has an owner
    """
    _check_claim(actor, file)
    return ClaimFile(file_id=file.id, responsible_by=actor.id, updated_at=_now(now))


def save_draft(
    actor: Actor,
    file: FileRecord,
    text: Optional[str],
    now: Optional[datetime] = None,
) -> SaveDraft:
    """Store intermediate transcription text. Status stays in_progress.

    Raises:
        Forbidden: If the actor is not the transcriber who claimed the file
        InvalidState: If the file is no longer in progress
    """
    _check_transcriber(actor, file)
    return SaveDraft(
        file_id=file.id,
        responsible_by=actor.id,
        transcription_text=(text or "").strip(),
        updated_at=_now(now),
    )


def submit(
    actor: Actor,
    file: FileRecord,
    text: Optional[str],
    now: Optional[datetime] = None,
) -> SubmitFile:
    """Finalize the transcription and send it for approval.

    Raises:
        Forbidden: If the actor is not the transcriber who claimed the file
        InvalidState: If the file is no longer in progress
        ValidationError: If the text is empty after trimming
    """
    _check_transcriber(actor, file)
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Transcription text cannot be empty")

    return SubmitFile(
        file_id=file.id,
        responsible_by=actor.id,
        transcription_text=cleaned,
        updated_at=_now(now),
    )


def approve(actor: Actor, file: FileRecord, now: Optional[datetime] = None) -> ApproveFile:
    """Accept a submitted transcription.

    Raises:
        Forbidden: If the actor is not an admin (checked before status)
        InvalidState: If the file is not awaiting approval
    """
    _check_approve(actor, file)
    return ApproveFile(file_id=file.id, updated_at=_now(now))


def reject(actor: Actor, file: FileRecord, now: Optional[datetime] = None) -> RejectFile:
    """Refuse a submitted transcription. Rejected files are terminal."""
    _check_reject(actor, file)
    return RejectFile(file_id=file.id, updated_at=_now(now))


def edit_title(
    actor: Actor,
    file: FileRecord,
    new_title: Optional[str],
    now: Optional[datetime] = None,
) -> RenameFile:
    _check_edit_title(actor, file)
    return RenameFile(file_id=file.id, title=_clean_title(new_title), updated_at=_now(now))


def delete(actor: Actor, file: FileRecord) -> DeleteFile:
    _check_delete(actor, file)
    return DeleteFile(file_id=file.id)


# =============================================================================
# VISIBILITY
# =============================================================================

def is_visible(actor: Actor, file: FileRecord) -> bool:
    """Admins see everything; regular users see unclaimed files and their own."""
    if actor.role is UserRole.ADMIN:
        return True
    return file.responsible_by is None or file.responsible_by == actor.id


def visible_to(actor: Actor, files: Iterable[FileRecord]) -> Iterator[FileRecord]:
    """Lazily filter ``files`` down to those ``actor`` may see."""
    return (file for file in files if is_visible(actor, file))


def actions_available_to(actor: Actor, file: FileRecord) -> FrozenSet[WorkflowAction]:
    """Evaluate every per-file guard and collect the ones that pass.

    Input-dependent checks (empty text, empty title) are not part of the
    result: they depend on what the caller will type, not on the file.
    """
    allowed = set()
    for action, guard in _GUARDS.items():
        try:
            guard(actor, file)
        except (Forbidden, InvalidState):
            continue
        allowed.add(action)
    return frozenset(allowed)
