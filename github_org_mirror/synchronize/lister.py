"""Streams an organization's paginated repository listing into a page channel."""

import asyncio
import time

import structlog

from github_org_mirror.github.abc import RepositoryListingProviderBase
from github_org_mirror.schemas.repository import RepositoryPage
from github_org_mirror.synchronize.channel import PageChannel
from github_org_mirror.synchronize.deadline import Deadline
from github_org_mirror.synchronize.exceptions import RateLimitExceededError
from github_org_mirror.synchronize.results import ListingOutcome
from github_org_mirror.utils.constants import DEFAULT_LISTING_TIMEOUT, MAX_PAGE_SIZE
from github_org_mirror.utils.retry import RetryPolicy

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class RemoteLister:
    """Producer half of the mirror pipeline.

    Requests one page at a time, each under its own listing deadline, and
    publishes every page to the channel. Listing stops for good on a rate
    limit or once the run deadline expires. Generic errors re-request the
    same page as allowed by ``retry_policy``.
    """

    def __init__(
        self,
        provider: RepositoryListingProviderBase,
        org: str,
        listing_timeout: float = DEFAULT_LISTING_TIMEOUT,
        retry_policy: RetryPolicy | None = None,
        per_page: int = MAX_PAGE_SIZE,
        first_page: int = 1,
    ) -> None:
        self.provider = provider
        self.org = org
        self.listing_timeout = listing_timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.per_page = per_page
        self.first_page = first_page

    async def list_page(self, page: int, run_deadline: Deadline) -> RepositoryPage:
        """Fetch a single page under a listing deadline nested inside the run deadline."""
        listing_deadline = run_deadline.child(self.listing_timeout)
        async with asyncio.timeout_at(listing_deadline.when):
            return await self.provider.list_organization_repositories(self.org, page=page, per_page=self.per_page)

    async def run(self, channel: PageChannel, run_deadline: Deadline) -> ListingOutcome:
        """Publish every page of the listing, then close the channel exactly once."""
        try:
            return await self._paginate(channel, run_deadline)
        finally:
            channel.close()
            logger.info("Closed page channel", org=self.org, pages_published=channel.published_count)

    async def _paginate(self, channel: PageChannel, run_deadline: Deadline) -> ListingOutcome:
        page_number: int | None = self.first_page
        attempt = 0
        while page_number is not None:
            if run_deadline.expired():
                logger.error("Run deadline exceeded, stopping repository listing", org=self.org, page=page_number)
                return ListingOutcome.DEADLINE_EXCEEDED

            start_time = time.time()
            try:
                page = await self.list_page(page_number, run_deadline)
            except RateLimitExceededError as exc:
                logger.error("Rate limit exceeded, stopping repository listing", org=self.org, page=page_number, error=str(exc))
                return ListingOutcome.RATE_LIMITED
            except Exception as exc:
                if run_deadline.expired():
                    logger.error("Run deadline exceeded while listing repositories", org=self.org, page=page_number, error=str(exc))
                    return ListingOutcome.DEADLINE_EXCEEDED
                if not self.retry_policy.should_retry(attempt):
                    logger.error(
                        "Giving up on repository listing after repeated errors",
                        org=self.org,
                        page=page_number,
                        attempts=attempt + 1,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    return ListingOutcome.FAILED
                wait_time = min(self.retry_policy.delay_for_attempt(attempt), run_deadline.remaining())
                logger.warning(
                    f"Repository listing failed, retrying in {wait_time:.1f} seconds",
                    org=self.org,
                    page=page_number,
                    attempt=attempt + 1,
                    max_retries=self.retry_policy.max_retries,
                    error=str(exc) or type(exc).__name__,
                    error_type=type(exc).__name__,
                )
                attempt += 1
                await asyncio.sleep(wait_time)
                continue

            attempt = 0
            await channel.publish(page)
            logger.info(
                "Published repository page",
                org=self.org,
                page=page.page_number,
                repository_count=len(page.repositories),
                next_page=page.next_page,
                duration=round(time.time() - start_time, 2),
            )
            page_number = page.next_page

        logger.info("Finished listing repositories", org=self.org)
        return ListingOutcome.COMPLETED
