"""Pydantic schemas for file workflow endpoints"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..domain.files.file_status import FileStatus
from ..domain.workflow.engine import WorkflowAction
from .service import FileView


class FileCreate(BaseModel):
    """Upload registration.

    Attributes:
        title: Display title, trimmed, 1-100 characters
        source_ref: Opaque reference to the stored image (persisted as file_path)
    """
    title: str
    source_ref: str


class TranscriptionText(BaseModel):
    text: str = ""


class TitleUpdate(BaseModel):
    title: str


class FileResponse(BaseModel):
    """File snapshot plus the caller's available actions."""
    id: int
    title: str
    source_ref: str
    status: FileStatus
    created_by: int
    creator_name: Optional[str] = None
    responsible_by: Optional[int] = None
    responsible_name: Optional[str] = None
    transcription_text: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    actions: List[WorkflowAction] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: FileView) -> "FileResponse":
        file = view.file
        return cls(
            id=file.id,
            title=file.title,
            source_ref=file.source_ref,
            status=file.status,
            created_by=file.created_by,
            creator_name=file.creator_name,
            responsible_by=file.responsible_by,
            responsible_name=file.responsible_name,
            transcription_text=file.transcription_text,
            created_at=file.created_at,
            updated_at=file.updated_at,
            actions=sorted(view.actions, key=lambda action: action.value),
        )


class FileListResponse(BaseModel):
    files: List[FileResponse]
    total: int


class DashboardStats(BaseModel):
    """Counts of files visible to the caller."""
    total: int
    pending: int
    in_progress: int
    approval: int
    completed: int
    rejected: int
