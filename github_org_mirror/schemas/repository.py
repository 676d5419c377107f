"""Pydantic schemas for repositories listed from a GitHub organization."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RemoteRepository(BaseModel):
    """Pydantic model for a repository owned by the remote organization."""

    model_config = ConfigDict(frozen=True)

    name: str
    ssh_url: str
    full_name: str | None = None
    clone_url: str | None = None
    default_branch: str | None = None
    archived: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)


class RepositoryPage(BaseModel):
    """Pydantic model for one page of an organization's repository listing."""

    model_config = ConfigDict(frozen=True)

    page_number: int
    repositories: tuple[RemoteRepository, ...] = ()
    next_page: int | None = None

    @property
    def has_more(self) -> bool:
        """Whether the listing continues on another page."""
        return self.next_page is not None

    @property
    def repository_names(self) -> list[str]:
        """Names of the repositories on this page, in listing order."""
        return [repository.name for repository in self.repositories]
