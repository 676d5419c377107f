"""Runs the mirror pipeline: one lister producing pages, one consumer reconciling them."""

import asyncio

import structlog

from github_org_mirror.synchronize.channel import PageChannel
from github_org_mirror.synchronize.deadline import Deadline
from github_org_mirror.synchronize.exceptions import RunDeadlineExceededError
from github_org_mirror.synchronize.inventory import LocalInventory
from github_org_mirror.synchronize.lister import RemoteLister
from github_org_mirror.synchronize.reconciler import SyncExecutor, reconcile_page
from github_org_mirror.synchronize.results import ListingOutcome, MirrorRunResult
from github_org_mirror.utils.constants import DEFAULT_PAGE_CHANNEL_SIZE, DEFAULT_REPOSITORY_TIMEOUT, DEFAULT_RUN_TIMEOUT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _finished_listing_outcome(lister_task: "asyncio.Task[ListingOutcome]") -> ListingOutcome:
    """Outcome of a lister task that has finished, was cancelled, or crashed."""
    if lister_task.cancelled():
        return ListingOutcome.DEADLINE_EXCEEDED
    if lister_task.exception() is not None:
        return ListingOutcome.FAILED
    return lister_task.result()


async def run_mirror(
    lister: RemoteLister,
    inventory: LocalInventory,
    executor: SyncExecutor,
    run_timeout: float = DEFAULT_RUN_TIMEOUT,
    repository_timeout: float = DEFAULT_REPOSITORY_TIMEOUT,
    channel_size: int = DEFAULT_PAGE_CHANNEL_SIZE,
) -> MirrorRunResult:
    """Drain the organization listing page by page until it is exhausted.

    The lister runs as an independent task for the whole run. Each received
    page is fully reconciled before the next one is requested. The run
    deadline bounds waiting for pages and is checked between pages.

    Raises:
        RunDeadlineExceededError: If the run deadline expires before the channel is drained.
            The partial result is attached to the exception.
    """
    run_deadline = Deadline.after(run_timeout)
    channel = PageChannel(maxsize=channel_size)
    result = MirrorRunResult()
    dispatched: set[str] = set()

    lister_task = asyncio.create_task(lister.run(channel, run_deadline), name="remote-lister")
    try:
        while True:
            if run_deadline.expired():
                raise RunDeadlineExceededError(result)
            try:
                async with asyncio.timeout_at(run_deadline.when):
                    page = await channel.receive()
            except TimeoutError:
                raise RunDeadlineExceededError(result) from None
            if page is None:
                break
            page_result = await reconcile_page(
                page,
                inventory,
                executor,
                run_deadline,
                repository_timeout=repository_timeout,
                dispatched=dispatched,
            )
            result.pages.append(page_result)
            if page_result.abandoned:
                raise RunDeadlineExceededError(result)
        result.listing_outcome = await lister_task
    except RunDeadlineExceededError:
        result.deadline_exceeded = True
        logger.error("context deadline exceeded, exiting...", pages_reconciled=len(result.pages))
        raise
    finally:
        if not lister_task.done():
            lister_task.cancel()
        await asyncio.wait([lister_task])
        if result.listing_outcome is None:
            result.listing_outcome = _finished_listing_outcome(lister_task)

    if result.listing_outcome is ListingOutcome.RATE_LIMITED:
        logger.warning("Repository listing stopped early because of the GitHub rate limit", pages_reconciled=len(result.pages))
    elif result.listing_outcome is ListingOutcome.FAILED:
        logger.warning("Repository listing stopped early because of repeated errors", pages_reconciled=len(result.pages))
    logger.info(
        "Mirror run complete",
        pages_reconciled=len(result.pages),
        updated_count=len(result.updated),
        acquired_count=len(result.acquired),
        failed_count=len(result.failed),
        listing_outcome=result.listing_outcome.value if result.listing_outcome else None,
    )
    return result
