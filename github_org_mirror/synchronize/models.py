"""Internal data models for repository synchronization."""

from dataclasses import dataclass
from enum import Enum

from github_org_mirror.schemas.repository import RemoteRepository
from github_org_mirror.synchronize.deadline import Deadline


class SyncOperation(Enum):
    """Enum for the git operation a repository needs."""

    UPDATE = "update"
    ACQUIRE = "acquire"


@dataclass(frozen=True)
class SyncTask:
    """A single git operation to perform against one repository before a deadline."""

    operation: SyncOperation
    repository: RemoteRepository
    deadline: Deadline

    @property
    def repository_name(self) -> str:
        """Name of the repository to synchronize."""
        return self.repository.name
