"""File snapshots and the typed mutations the workflow engine produces.

There is one command per mutating operation. A command carries exactly the
fields its operation may change (``changes()``) and the row conditions the
store must verify in the same UPDATE statement (``conditions()``). A store
that applies a command as a single conditional UPDATE therefore performs a
compare-and-swap: if another actor moved the file first, zero rows match and
the command is refused instead of overwriting.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional

from ..files.file_status import FileStatus


@dataclass(frozen=True)
class FileRecord:
    """Read-only snapshot of a file row.

    ``creator_name`` and ``responsible_name`` are display data joined in by
    the store and take no part in equality.
    """
    id: int
    title: str
    source_ref: str
    created_by: int
    responsible_by: Optional[int]
    status: FileStatus
    transcription_text: Optional[str]
    created_at: datetime
    updated_at: datetime
    creator_name: Optional[str] = field(default=None, compare=False)
    responsible_name: Optional[str] = field(default=None, compare=False)


@dataclass(frozen=True)
class CreateFile:
    """Insert a new pending file."""
    title: str
    source_ref: str
    created_by: int
    created_at: datetime

    status: ClassVar[FileStatus] = FileStatus.PENDING

    def to_record(self, file_id: int) -> FileRecord:
        return FileRecord(
            id=file_id,
            title=self.title,
            source_ref=self.source_ref,
            created_by=self.created_by,
            responsible_by=None,
            status=self.status,
            transcription_text=None,
            created_at=self.created_at,
            updated_at=self.created_at,
        )


class _FileUpdate:
    """Shared behaviour of commands that modify an existing file."""

    file_id: int
    updated_at: datetime

    def changes(self) -> Dict[str, Any]:
        raise NotImplementedError

    def conditions(self) -> Dict[str, Any]:
        """Column values the row must still hold. ``None`` means IS NULL."""
        return {}

    def apply(self, record: FileRecord) -> FileRecord:
        """Return the snapshot this command produces from ``record``."""
        return replace(record, **self.changes())


@dataclass(frozen=True)
class ClaimFile(_FileUpdate):
    file_id: int
    responsible_by: int
    updated_at: datetime

    def changes(self) -> Dict[str, Any]:
        return {
            "responsible_by": self.responsible_by,
            "status": FileStatus.IN_PROGRESS,
            "updated_at": self.updated_at,
        }

    def conditions(self) -> Dict[str, Any]:
        return {"status": FileStatus.PENDING, "responsible_by": None}


@dataclass(frozen=True)
class SaveDraft(_FileUpdate):
    file_id: int
    responsible_by: int
    transcription_text: str
    updated_at: datetime

    def changes(self) -> Dict[str, Any]:
        return {
            "transcription_text": self.transcription_text,
            "updated_at": self.updated_at,
        }

    def conditions(self) -> Dict[str, Any]:
        return {"status": FileStatus.IN_PROGRESS, "responsible_by": self.responsible_by}


@dataclass(frozen=True)
class SubmitFile(_FileUpdate):
    file_id: int
    responsible_by: int
    transcription_text: str
    updated_at: datetime

    def changes(self) -> Dict[str, Any]:
        return {
            "transcription_text": self.transcription_text,
            "status": FileStatus.APPROVAL,
            "updated_at": self.updated_at,
        }

    def conditions(self) -> Dict[str, Any]:
        return {"status": FileStatus.IN_PROGRESS, "responsible_by": self.responsible_by}


@dataclass(frozen=True)
class ApproveFile(_FileUpdate):
    file_id: int
    updated_at: datetime

    def changes(self) -> Dict[str, Any]:
        return {"status": FileStatus.COMPLETED, "updated_at": self.updated_at}

    def conditions(self) -> Dict[str, Any]:
        return {"status": FileStatus.APPROVAL}


@dataclass(frozen=True)
class RejectFile(_FileUpdate):
    file_id: int
    updated_at: datetime

    def changes(self) -> Dict[str, Any]:
        return {"status": FileStatus.REJECTED, "updated_at": self.updated_at}

    def conditions(self) -> Dict[str, Any]:
        return {"status": FileStatus.APPROVAL}


@dataclass(frozen=True)
class RenameFile(_FileUpdate):
    file_id: int
    title: str
    updated_at: datetime

    def changes(self) -> Dict[str, Any]:
        return {"title": self.title, "updated_at": self.updated_at}


@dataclass(frozen=True)
class DeleteFile:
    file_id: int


FileUpdate = ClaimFile | SaveDraft | SubmitFile | ApproveFile | RejectFile | RenameFile
