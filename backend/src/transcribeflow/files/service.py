"""File workflow service.

Each operation follows the same cycle: read the file snapshot through the
store port, ask the engine for a command, and hand the command back to the
store, which applies it as one conditional UPDATE. No lock is held between
the read and the write; the UPDATE conditions catch concurrent changes.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional

from ..domain.errors import Forbidden, InvalidState, NotFound, ValidationError
from ..domain.files.file_status import FileStatus
from ..domain.workflow import engine
from ..domain.workflow.actor import Actor
from ..domain.workflow.commands import FileRecord, FileUpdate
from ..domain.workflow.engine import WorkflowAction
from ..domain.workflow.ports import FileRecordStorePort, UserDirectoryPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileView:
    """A file together with what the viewing actor may do with it."""
    file: FileRecord
    actions: FrozenSet[WorkflowAction]


class FileWorkflowService:
    """Runs workflow operations on behalf of a resolved actor.

    Args:
        store: File record store adapter
        users: User directory adapter, used to resolve actors by id
    """

    def __init__(self, store: FileRecordStorePort, users: UserDirectoryPort):
        self.store = store
        self.users = users

    def actor_for(self, user_id: int) -> Actor:
        """Resolve an actor when only a user id is known.

        Raises:
            NotFound: If the user does not exist
        """
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return Actor.from_user(user)

    def _load(self, file_id: int) -> FileRecord:
        file = self.store.find_by_id(file_id)
        if file is None:
            raise NotFound(f"File {file_id} not found")
        return file

    def _transition(
        self,
        actor: Actor,
        file_id: int,
        action: WorkflowAction,
        decide: Callable[[FileRecord], FileUpdate],
    ) -> FileRecord:
        file = self._load(file_id)
        try:
            command = decide(file)
            updated = self.store.update_fields(command)
        except (ValidationError, Forbidden, InvalidState) as e:
            logger.warning(
                f"{action.value} refused: {e.message}",
                extra={"user_id": actor.id, "file_id": file_id, "action": action.value},
            )
            raise

        logger.info(
            f"File {action.value}: {file.status.value} -> {updated.status.value}",
            extra={
                "user_id": actor.id,
                "file_id": file_id,
                "action": action.value,
                "status": updated.status.value,
            },
        )
        return updated

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def create_file(self, actor: Actor, title: Optional[str], source_ref: Optional[str]) -> FileRecord:
        command = engine.create(actor, title, source_ref)
        file_id = self.store.insert(command)
        logger.info(
            f"File created: {command.title}",
            extra={"user_id": actor.id, "file_id": file_id, "status": command.status.value},
        )
        return self._load(file_id)

    def claim(self, actor: Actor, file_id: int) -> FileRecord:
        return self._transition(
            actor, file_id, WorkflowAction.CLAIM,
            lambda file: engine.claim(actor, file),
        )

    def save_draft(self, actor: Actor, file_id: int, text: Optional[str]) -> FileRecord:
        return self._transition(
            actor, file_id, WorkflowAction.SAVE_DRAFT,
            lambda file: engine.save_draft(actor, file, text),
        )

    def submit(self, actor: Actor, file_id: int, text: Optional[str]) -> FileRecord:
        return self._transition(
            actor, file_id, WorkflowAction.SUBMIT,
            lambda file: engine.submit(actor, file, text),
        )

    def approve(self, actor: Actor, file_id: int) -> FileRecord:
        return self._transition(
            actor, file_id, WorkflowAction.APPROVE,
            lambda file: engine.approve(actor, file),
        )

    def reject(self, actor: Actor, file_id: int) -> FileRecord:
        return self._transition(
            actor, file_id, WorkflowAction.REJECT,
            lambda file: engine.reject(actor, file),
        )

    def edit_title(self, actor: Actor, file_id: int, new_title: Optional[str]) -> FileRecord:
        return self._transition(
            actor, file_id, WorkflowAction.EDIT_TITLE,
            lambda file: engine.edit_title(actor, file, new_title),
        )

    def delete_file(self, actor: Actor, file_id: int) -> None:
        file = self._load(file_id)
        try:
            command = engine.delete(actor, file)
        except Forbidden as e:
            logger.warning(
                f"delete refused: {e.message}",
                extra={"user_id": actor.id, "file_id": file_id, "action": "delete"},
            )
            raise
        self.store.delete(command.file_id)
        logger.info("File deleted", extra={"user_id": actor.id, "file_id": file_id, "action": "delete"})

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_file(self, actor: Actor, file_id: int) -> FileView:
        """Return the file and the actor's available actions.

        Raises:
            NotFound: If the file does not exist
            Forbidden: If the file is claimed by another user and the actor is not an admin
        """
        file = self._load(file_id)
        if not engine.is_visible(actor, file):
            raise Forbidden(f"File {file_id} is assigned to another user")
        return FileView(file=file, actions=engine.actions_available_to(actor, file))

    def list_visible(self, actor: Actor, status: Optional[FileStatus] = None) -> List[FileView]:
        """Visible files, newest first, optionally restricted to one status."""
        files = engine.visible_to(actor, self.store.list_all())
        return [
            FileView(file=file, actions=engine.actions_available_to(actor, file))
            for file in files
            if status is None or file.status is status
        ]

    def dashboard_stats(self, actor: Actor) -> Dict[str, int]:
        """Count visible files in total and per status."""
        counts = {file_status.value: 0 for file_status in FileStatus}
        total = 0
        for file in engine.visible_to(actor, self.store.list_all()):
            counts[file.status.value] += 1
            total += 1
        counts["total"] = total
        return counts
