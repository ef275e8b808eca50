"""File record repository for database operations"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ...domain.errors import Forbidden, InvalidState, NotFound, StoreError
from ...domain.files.file_status import parse_status
from ...domain.workflow.commands import CreateFile, FileRecord, FileUpdate
from ...domain.workflow.ports import FileRecordStorePort
from ...models.file import File as FileModel

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _db_value(value):
    return value.value if hasattr(value, "value") else value


def to_record(row: FileModel) -> FileRecord:
    """Convert a File row to its domain snapshot."""
    return FileRecord(
        id=row.id,
        title=row.title,
        source_ref=row.source_ref,
        created_by=row.created_by,
        responsible_by=row.responsible_by,
        status=parse_status(row.status),
        transcription_text=row.transcription_text,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
        creator_name=row.creator.name if row.creator else None,
        responsible_name=row.responsible.name if row.responsible else None,
    )


class FileRepository(FileRecordStorePort):
    """Repository for files table operations.

    Each public method is its own transaction: it commits on success and
    rolls back and raises StoreError on database failure. Updates are applied
    as a single conditional UPDATE built from the command's conditions, so a
    command computed from a stale snapshot matches zero rows instead of
    overwriting a concurrent change.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _query(self):
        return select(FileModel).options(
            joinedload(FileModel.creator),
            joinedload(FileModel.responsible),
        )

    def insert(self, command: CreateFile) -> int:
        row = FileModel(
            title=command.title,
            source_ref=command.source_ref,
            created_by=command.created_by,
            responsible_by=None,
            status=command.status.value,
            transcription_text=None,
            created_at=command.created_at,
            updated_at=command.created_at,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to insert file", exc_info=True)
            raise StoreError("Could not save the file") from e

        return row.id

    def update_fields(self, command: FileUpdate) -> FileRecord:
        """Apply a workflow command as one conditional UPDATE.

        Args:
            command: Typed mutation produced by the workflow engine

        Returns:
            FileRecord: The row as stored after the update

        Raises:
            NotFound: If the file no longer exists
            InvalidState: If the status changed since the command was computed
            Forbidden: If the owner no longer matches the command
            StoreError: If the database fails
        """
        stmt = update(FileModel).where(FileModel.id == command.file_id)
        for attr, expected in command.conditions().items():
            column = getattr(FileModel, attr)
            if expected is None:
                stmt = stmt.where(column.is_(None))
            else:
                stmt = stmt.where(column == _db_value(expected))

        values = {
            getattr(FileModel, attr): _db_value(value)
            for attr, value in command.changes().items()
        }
        stmt = stmt.values(values).execution_options(synchronize_session=False)

        try:
            result = self.db.execute(stmt)
            if result.rowcount == 1:
                self.db.commit()
            else:
                self.db.rollback()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Failed to update file {command.file_id}",
                extra={"file_id": command.file_id},
                exc_info=True
            )
            raise StoreError("Could not update the file") from e

        current = self.find_by_id(command.file_id)
        if result.rowcount != 1:
            self._raise_conflict(command, current)
        return current

    def _raise_conflict(self, command: FileUpdate, current: Optional[FileRecord]) -> None:
        if current is None:
            raise NotFound(f"File {command.file_id} not found")

        conditions = command.conditions()
        expected_status = conditions.get("status")
        if expected_status is not None and current.status != expected_status:
            raise InvalidState(
                f"File {current.id} changed to {current.status.value} before the update was applied",
                current_status=current.status.value,
            )
        raise Forbidden(f"File {current.id} is owned by another user")

    def find_by_id(self, file_id: int) -> Optional[FileRecord]:
        try:
            # Refresh identity map so reads after a bulk UPDATE see new values
            self.db.expire_all()
            row = self.db.execute(
                self._query().where(FileModel.id == file_id)
            ).scalars().first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not load the file") from e

        return to_record(row) if row else None

    def list_all(self) -> List[FileRecord]:
        """Return every file, newest first."""
        try:
            self.db.expire_all()
            rows = self.db.execute(
                self._query().order_by(FileModel.created_at.desc(), FileModel.id.desc())
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not list files") from e

        return [to_record(row) for row in rows]

    def delete(self, file_id: int) -> None:
        try:
            result = self.db.execute(
                delete(FileModel)
                .where(FileModel.id == file_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not delete the file") from e

        if result.rowcount == 0:
            raise NotFound(f"File {file_id} not found")
