"""Workflow domain module - engine, actor, commands, storage ports"""

from . import engine
from .actor import Actor
from .commands import (
    FileRecord,
    CreateFile,
    ClaimFile,
    SaveDraft,
    SubmitFile,
    ApproveFile,
    RejectFile,
    RenameFile,
    DeleteFile,
    FileUpdate,
)
from .engine import WorkflowAction, visible_to, actions_available_to, is_visible
from .ports import FileRecordStorePort, UserDirectoryPort

__all__ = [
    "engine",
    "Actor",
    "FileRecord",
    "CreateFile",
    "ClaimFile",
    "SaveDraft",
    "SubmitFile",
    "ApproveFile",
    "RejectFile",
    "RenameFile",
    "DeleteFile",
    "FileUpdate",
    "WorkflowAction",
    "visible_to",
    "actions_available_to",
    "is_visible",
    "FileRecordStorePort",
    "UserDirectoryPort",
]
