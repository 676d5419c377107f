"""Snapshot of the repositories that already exist in the local directory."""

import os
from dataclasses import dataclass
from pathlib import Path

import structlog

from github_org_mirror.synchronize.exceptions import LocalInventoryError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LocalRepositoryEntry:
    """An entry of the local repository directory."""

    name: str
    is_directory: bool


@dataclass(frozen=True)
class LocalInventory:
    """Read-only snapshot of the local repository directory, taken once per run.

    Repositories cloned during the run are not added back, so every lookup
    reflects the directory as it was before synchronization started.
    """

    repo_dir: Path
    entries: tuple[LocalRepositoryEntry, ...]

    def contains_repository(self, name: str) -> bool:
        """Return whether a directory with exactly this (case-sensitive) name exists."""
        return any(entry.is_directory and entry.name == name for entry in self.entries)

    @property
    def repository_names(self) -> list[str]:
        """Sorted names of the directories in the snapshot."""
        return sorted(entry.name for entry in self.entries if entry.is_directory)


def snapshot_local_repositories(repo_dir: Path) -> LocalInventory:
    """Read the entries of ``repo_dir`` into a LocalInventory.

    Raises:
        LocalInventoryError: If the directory does not exist or cannot be read.
    """
    try:
        with os.scandir(repo_dir) as scanner:
            entries = tuple(LocalRepositoryEntry(name=entry.name, is_directory=entry.is_dir()) for entry in scanner)
    except OSError as exc:
        raise LocalInventoryError(str(repo_dir), exc.strerror or str(exc)) from exc

    inventory = LocalInventory(repo_dir=repo_dir, entries=entries)
    logger.info(
        "Snapshotted local repositories",
        repo_dir=str(repo_dir),
        entry_count=len(entries),
        repository_count=len(inventory.repository_names),
    )
    return inventory
