"""Orchestrates mirroring of a GitHub organization into a local directory."""

import time

import structlog

from github_org_mirror.configuration.models import MirrorConfig
from github_org_mirror.github.abc import RepositoryListingProviderBase
from github_org_mirror.github.adapter import GitHubKitAdapter
from github_org_mirror.synchronize.coordinator import run_mirror
from github_org_mirror.synchronize.executor import GitSyncExecutor
from github_org_mirror.synchronize.inventory import snapshot_local_repositories
from github_org_mirror.synchronize.lister import RemoteLister
from github_org_mirror.synchronize.reconciler import SyncExecutor
from github_org_mirror.synchronize.results import MirrorRunResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def run_mirror_workflow(
    config: MirrorConfig,
    provider: RepositoryListingProviderBase | None = None,
    executor: SyncExecutor | None = None,
) -> MirrorRunResult:
    """Run the mirror workflow: snapshot local repositories, then pull or clone every organization repository.

    The local directory is read before any GitHub request is made, so an
    unreadable directory fails the run without touching the network.

    Raises:
        LocalInventoryError: If the local repository directory cannot be read.
        RunDeadlineExceededError: If the run deadline expires before every page is reconciled.
    """
    inventory = snapshot_local_repositories(config.repo_dir)

    if provider is None:
        provider = await GitHubKitAdapter.create(github_api_key=config.github_api_key, github_api_url=config.github_api_url)
    if executor is None:
        executor = GitSyncExecutor(repo_dir=config.repo_dir)

    lister = RemoteLister(
        provider=provider,
        org=config.org,
        listing_timeout=config.timeouts.listing_timeout,
        retry_policy=config.listing_retry,
    )

    start_time = time.time()
    logger.info(
        "Mirroring organization repositories",
        org=config.org,
        repo_dir=str(config.repo_dir),
        git_user=config.git_user,
        run_timeout=config.timeouts.run_timeout,
    )
    result = await run_mirror(
        lister,
        inventory,
        executor,
        run_timeout=config.timeouts.run_timeout,
        repository_timeout=config.timeouts.repository_timeout,
    )
    logger.info("Mirrored organization repositories", org=config.org, duration=round(time.time() - start_time, 2))
    return result
