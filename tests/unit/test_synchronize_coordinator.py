"""Unit tests for the page-by-page mirror pipeline."""

from pathlib import Path

import pytest

from github_org_mirror.synchronize.coordinator import run_mirror
from github_org_mirror.synchronize.exceptions import RateLimitExceededError, RunDeadlineExceededError
from github_org_mirror.synchronize.inventory import snapshot_local_repositories
from github_org_mirror.synchronize.lister import RemoteLister
from github_org_mirror.synchronize.results import ListingOutcome, SyncOutcome
from github_org_mirror.utils.retry import RetryPolicy
from tests.unit.utils import FakeListingProvider, RecordingExecutor, make_pages

FAST_RETRY = RetryPolicy(max_retries=1, initial_delay=0.0, max_delay=0.0)


def make_lister(provider: FakeListingProvider) -> RemoteLister:
    return RemoteLister(provider, org="example-org", retry_policy=FAST_RETRY)


@pytest.mark.asyncio
async def test_mirrors_every_page(repo_dir: Path) -> None:
    """Test a complete run over several pages."""
    provider = FakeListingProvider(make_pages(["alpha", "beta"], ["gamma"]))
    executor = RecordingExecutor(delay=0.01)

    result = await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), executor, run_timeout=5)

    assert result.listing_outcome is ListingOutcome.COMPLETED
    assert result.deadline_exceeded is False
    assert [page.page_number for page in result.pages] == [1, 2]
    assert [r.repository_name for r in result.updated] == ["alpha"]
    assert [r.repository_name for r in result.acquired] == ["beta", "gamma"]
    assert result.failed == []


@pytest.mark.asyncio
async def test_pages_reconciled_one_at_a_time(repo_dir: Path) -> None:
    """Test that a page is finished before the next page is dispatched."""
    provider = FakeListingProvider(make_pages(["alpha", "beta"], ["gamma", "delta"]))
    executor = RecordingExecutor(delay=0.02)

    await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), executor, run_timeout=5)

    assert executor.max_running == 2
    assert executor.completed.index("alpha") < [task.repository_name for task in executor.tasks].index("gamma")


@pytest.mark.asyncio
async def test_rate_limit_ends_run_normally(repo_dir: Path) -> None:
    """Test that a rate limit keeps the pages already listed and returns normally."""
    provider = FakeListingProvider(make_pages(["alpha"], ["beta"], ["gamma"]), errors={2: [RateLimitExceededError("rate limited")]})
    executor = RecordingExecutor()

    result = await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), executor, run_timeout=5)

    assert result.listing_outcome is ListingOutcome.RATE_LIMITED
    assert result.rate_limited is True
    assert result.deadline_exceeded is False
    assert provider.requests == [1, 2]
    assert [task.repository_name for task in executor.tasks] == ["alpha"]


@pytest.mark.asyncio
async def test_listing_failure_ends_run_normally(repo_dir: Path) -> None:
    """Test that a listing that keeps failing ends the run without an exception."""
    errors: dict[int, list[BaseException]] = {1: [RuntimeError("boom"), RuntimeError("boom")]}
    provider = FakeListingProvider(make_pages(["alpha"]), errors=errors)

    result = await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), RecordingExecutor(), run_timeout=5)

    assert result.listing_outcome is ListingOutcome.FAILED
    assert result.pages == []


@pytest.mark.asyncio
async def test_run_deadline_stops_before_next_page(repo_dir: Path) -> None:
    """Test that once the run deadline passes, no further page is dispatched."""
    provider = FakeListingProvider(make_pages(["alpha", "beta"], ["gamma"]))
    executor = RecordingExecutor(delays={"alpha": 1.0})

    with pytest.raises(RunDeadlineExceededError) as exc_info:
        await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), executor, run_timeout=0.1)

    result = exc_info.value.result
    assert result.deadline_exceeded is True
    assert [task.repository_name for task in executor.tasks] == ["alpha", "beta"]
    by_name = {r.repository_name: r for r in result.results}
    assert by_name["alpha"].outcome is SyncOutcome.FAILED
    assert by_name["alpha"].timed_out is True
    assert by_name["beta"].outcome is SyncOutcome.ACQUIRED


@pytest.mark.asyncio
async def test_run_deadline_while_waiting_for_pages(repo_dir: Path) -> None:
    """Test that a listing slower than the run deadline ends the run."""
    provider = FakeListingProvider(make_pages(["alpha"]), delay=1.0)
    executor = RecordingExecutor()

    with pytest.raises(RunDeadlineExceededError) as exc_info:
        await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), executor, run_timeout=0.05)

    assert exc_info.value.result.pages == []
    assert exc_info.value.result.listing_outcome is not None
    assert executor.tasks == []


@pytest.mark.asyncio
async def test_repository_listed_twice_synchronized_once(repo_dir: Path) -> None:
    """Test that a repository appearing on two pages is only synchronized once."""
    provider = FakeListingProvider(make_pages(["alpha", "beta"], ["beta", "gamma"]))
    executor = RecordingExecutor()

    result = await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), executor, run_timeout=5)

    assert [task.repository_name for task in executor.tasks] == ["alpha", "beta", "gamma"]
    assert result.pages[1].duplicates == ["beta"]


@pytest.mark.asyncio
async def test_backpressure_with_small_channel(repo_dir: Path) -> None:
    """Test that a one-page channel still delivers every page."""
    provider = FakeListingProvider(make_pages(["a"], ["b"], ["c"], ["d"]))
    executor = RecordingExecutor(delay=0.01)

    result = await run_mirror(make_lister(provider), snapshot_local_repositories(repo_dir), executor, run_timeout=5, channel_size=1)

    assert result.listing_outcome is ListingOutcome.COMPLETED
    assert [page.page_number for page in result.pages] == [1, 2, 3, 4]
