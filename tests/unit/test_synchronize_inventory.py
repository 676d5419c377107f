"""Unit tests for the local repository inventory."""

from pathlib import Path

import pytest

from github_org_mirror.synchronize.exceptions import LocalInventoryError
from github_org_mirror.synchronize.inventory import LocalInventory, LocalRepositoryEntry, snapshot_local_repositories


def test_snapshot_records_directories_and_files(repo_dir: Path) -> None:
    """Test that every entry is recorded along with whether it is a directory."""
    inventory = snapshot_local_repositories(repo_dir)
    assert set(inventory.entries) == {
        LocalRepositoryEntry(name="alpha", is_directory=True),
        LocalRepositoryEntry(name="notes.txt", is_directory=False),
    }
    assert inventory.repository_names == ["alpha"]


@pytest.mark.parametrize(
    "name,expected",
    [
        pytest.param("alpha", True, id="existing directory"),
        pytest.param("Alpha", False, id="match is case sensitive"),
        pytest.param("alph", False, id="no prefix match"),
        pytest.param("notes.txt", False, id="files do not count"),
        pytest.param("beta", False, id="absent"),
    ],
)
def test_contains_repository(repo_dir: Path, name: str, expected: bool) -> None:
    """Test exact, case-sensitive, directory-only lookups."""
    inventory = snapshot_local_repositories(repo_dir)
    assert inventory.contains_repository(name) is expected


def test_snapshot_is_not_refreshed(repo_dir: Path) -> None:
    """Test that repositories created after the snapshot are not seen."""
    inventory = snapshot_local_repositories(repo_dir)
    (repo_dir / "beta").mkdir()
    assert inventory.contains_repository("beta") is False


def test_empty_directory(tmp_path: Path) -> None:
    """Test that an empty directory yields an empty inventory."""
    inventory = snapshot_local_repositories(tmp_path)
    assert inventory == LocalInventory(repo_dir=tmp_path, entries=())


def test_missing_directory_raises(tmp_path: Path) -> None:
    """Test that an unreadable root directory is a fatal LocalInventoryError."""
    with pytest.raises(LocalInventoryError) as exc_info:
        snapshot_local_repositories(tmp_path / "missing")
    assert exc_info.value.repo_dir == str(tmp_path / "missing")


def test_file_instead_of_directory_raises(tmp_path: Path) -> None:
    """Test that a regular file as the root directory raises LocalInventoryError."""
    not_a_directory = tmp_path / "file"
    not_a_directory.write_text("")
    with pytest.raises(LocalInventoryError):
        snapshot_local_repositories(not_a_directory)
