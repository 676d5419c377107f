"""Decides how each listed repository is synchronized and fans the work out."""

import asyncio
import time
from typing import Protocol

import structlog

from github_org_mirror.schemas.repository import RemoteRepository, RepositoryPage
from github_org_mirror.synchronize.deadline import Deadline
from github_org_mirror.synchronize.inventory import LocalInventory
from github_org_mirror.synchronize.models import SyncOperation, SyncTask
from github_org_mirror.synchronize.results import PageReconciliationResult, RepositorySyncResult
from github_org_mirror.utils.constants import DEFAULT_REPOSITORY_TIMEOUT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class SyncExecutor(Protocol):
    """Anything that can run a SyncTask to completion."""

    async def run(self, task: SyncTask) -> RepositorySyncResult: ...


def decide_sync_operation(repository: RemoteRepository, inventory: LocalInventory) -> SyncOperation:
    """Pull repositories that already exist locally, clone the rest."""
    if inventory.contains_repository(repository.name):
        return SyncOperation.UPDATE
    return SyncOperation.ACQUIRE


async def reconcile_page(
    page: RepositoryPage,
    inventory: LocalInventory,
    executor: SyncExecutor,
    run_deadline: Deadline,
    repository_timeout: float = DEFAULT_REPOSITORY_TIMEOUT,
    dispatched: set[str] | None = None,
) -> PageReconciliationResult:
    """Synchronize every repository of a page concurrently and wait for all of them.

    Repositories are dispatched in page order. Once a repository's deadline
    is found already expired, it and every repository after it in the page
    are abandoned; tasks dispatched before that keep running to completion.

    Args:
        page: The page of remote repositories.
        inventory: Snapshot of the local repository directory.
        executor: Runs each SyncTask.
        run_deadline: Deadline of the whole run; repository deadlines never outlive it.
        repository_timeout: Time budget in seconds for each git command.
        dispatched: Names dispatched by earlier pages of the run. Updated in place;
            names already present are skipped so a repository is synchronized once.

    Returns:
        PageReconciliationResult: Results in dispatch order, plus abandoned and duplicate names.
    """
    if dispatched is None:
        dispatched = set()
    page_result = PageReconciliationResult(page_number=page.page_number)
    tasks: list[asyncio.Task[RepositorySyncResult]] = []
    start_time = time.time()

    async with asyncio.TaskGroup() as task_group:
        for index, repository in enumerate(page.repositories):
            repository_deadline = run_deadline.child(repository_timeout)
            if repository_deadline.expired():
                page_result.abandoned = [remaining.name for remaining in page.repositories[index:]]
                logger.error(
                    f"context deadline exceeded for repo {repository.name}",
                    page=page.page_number,
                    abandoned_count=len(page_result.abandoned),
                )
                break

            if repository.name in dispatched:
                logger.warning("Repository already synchronized in this run, skipping", repository=repository.name, page=page.page_number)
                page_result.duplicates.append(repository.name)
                continue
            dispatched.add(repository.name)

            operation = decide_sync_operation(repository, inventory)
            logger.debug("Dispatching repository", repository=repository.name, operation=operation.value, page=page.page_number)
            task = SyncTask(operation=operation, repository=repository, deadline=repository_deadline)
            tasks.append(task_group.create_task(executor.run(task), name=f"sync-{repository.name}"))

    page_result.results = [task.result() for task in tasks]
    logger.info(
        "Reconciled repository page",
        page=page.page_number,
        dispatched_count=len(tasks),
        failed_count=sum(1 for result in page_result.results if not result.succeeded),
        abandoned_count=len(page_result.abandoned),
        duration=round(time.time() - start_time, 2),
    )
    return page_result
