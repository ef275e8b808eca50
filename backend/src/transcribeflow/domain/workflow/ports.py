"""Storage ports used by the workflow service (hexagonal architecture).

The engine itself never touches these; the service reads a snapshot through
a port, asks the engine for a command, and hands the command back to the
port. Adapters live in ``infrastructure.repositories``.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..users.records import NewUser, UserRecord, UserUpdate
from ..users.roles import UserRole
from .commands import CreateFile, FileRecord, FileUpdate


class FileRecordStorePort(ABC):
    """Persistence contract for file rows.

    Guarantees:
    - ``update_fields`` applies a command atomically as one conditional
      UPDATE; readers never observe a partially applied command
    - ``list_all`` is ordered newest first by ``created_at``
    """

    @abstractmethod
    def insert(self, command: CreateFile) -> int:
        """Persist a new file and return its id."""

    @abstractmethod
    def update_fields(self, command: FileUpdate) -> FileRecord:
        """Apply ``command`` if the row still satisfies its conditions.

        Returns:
            The file as stored after the update

        Raises:
            NotFound: If the file does not exist
            InvalidState: If the status moved since the command was computed
            Forbidden: If ownership no longer matches the command
            StoreError: If the database fails
        """

    @abstractmethod
    def find_by_id(self, file_id: int) -> Optional[FileRecord]:
        pass

    @abstractmethod
    def list_all(self) -> List[FileRecord]:
        pass

    @abstractmethod
    def delete(self, file_id: int) -> None:
        """Remove the file.

        Raises:
            NotFound: If the file does not exist
        """


class UserDirectoryPort(ABC):
    """Account records and role lookups."""

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[UserRecord]:
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[UserRecord]:
        pass

    @abstractmethod
    def list_all(self) -> List[UserRecord]:
        pass

    @abstractmethod
    def create(self, new_user: NewUser) -> UserRecord:
        pass

    @abstractmethod
    def update_fields(self, user_id: int, update: UserUpdate) -> UserRecord:
        pass

    @abstractmethod
    def set_active(self, user_id: int, active: bool) -> UserRecord:
        pass

    @abstractmethod
    def require_role(self, user_id: int) -> UserRole:
        """Return the user's role.

        Raises:
            NotFound: If the user does not exist
        """
