"""Test doubles shared by the synchronize unit tests."""

import asyncio

from github_org_mirror.github.abc import RepositoryListingProviderBase
from github_org_mirror.schemas.repository import RemoteRepository, RepositoryPage
from github_org_mirror.synchronize.models import SyncOperation, SyncTask
from github_org_mirror.synchronize.results import RepositorySyncResult, SyncOutcome
from github_org_mirror.utils.constants import MAX_PAGE_SIZE


def make_repository(name: str) -> RemoteRepository:
    """Build a remote repository with a conventional SSH URL."""
    return RemoteRepository(name=name, ssh_url=f"git@github.com:example-org/{name}.git", full_name=f"example-org/{name}")


def make_pages(*pages: list[str]) -> dict[int, RepositoryPage]:
    """Build consecutive pages, numbered from 1, from lists of repository names."""
    built: dict[int, RepositoryPage] = {}
    for index, names in enumerate(pages, start=1):
        built[index] = RepositoryPage(
            page_number=index,
            repositories=tuple(make_repository(name) for name in names),
            next_page=index + 1 if index < len(pages) else None,
        )
    return built


class FakeListingProvider(RepositoryListingProviderBase):
    """Serves prepared pages and raises prepared errors, recording every request."""

    def __init__(
        self,
        pages: dict[int, RepositoryPage],
        errors: dict[int, list[BaseException]] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.pages = pages
        self.errors = errors or {}
        self.delay = delay
        self.requests: list[int] = []

    async def list_organization_repositories(self, org: str, page: int, per_page: int = MAX_PAGE_SIZE) -> RepositoryPage:
        self.requests.append(page)
        if self.delay:
            await asyncio.sleep(self.delay)
        pending_errors = self.errors.get(page)
        if pending_errors:
            raise pending_errors.pop(0)
        return self.pages[page]


class RecordingExecutor:
    """Pretends to run git, recording tasks and how many ran at once."""

    def __init__(self, delay: float = 0.0, delays: dict[str, float] | None = None, failures: set[str] | None = None) -> None:
        self.delay = delay
        self.delays = delays or {}
        self.failures = failures or set()
        self.tasks: list[SyncTask] = []
        self.completed: list[str] = []
        self.running = 0
        self.max_running = 0

    async def run(self, task: SyncTask) -> RepositorySyncResult:
        self.tasks.append(task)
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        try:
            delay = self.delays.get(task.repository_name, self.delay)
            try:
                async with asyncio.timeout_at(task.deadline.when):
                    await asyncio.sleep(delay)
            except TimeoutError:
                return RepositorySyncResult(
                    repository_name=task.repository_name,
                    operation=task.operation,
                    outcome=SyncOutcome.FAILED,
                    reason="context deadline exceeded",
                    timed_out=True,
                )
            if task.repository_name in self.failures:
                return RepositorySyncResult(
                    repository_name=task.repository_name,
                    operation=task.operation,
                    outcome=SyncOutcome.FAILED,
                    reason="git exited with status 1",
                )
            outcome = SyncOutcome.UPDATED if task.operation is SyncOperation.UPDATE else SyncOutcome.ACQUIRED
            return RepositorySyncResult(repository_name=task.repository_name, operation=task.operation, outcome=outcome)
        finally:
            self.running -= 1
            self.completed.append(task.repository_name)

    def operations(self) -> dict[str, SyncOperation]:
        return {task.repository_name: task.operation for task in self.tasks}
