"""Bounded retry policy for transient GitHub listing errors.

Rate limit errors are never retried here. Once GitHub reports the rate limit
as exhausted, listing stops for the run; only generic errors (timeouts,
5xx responses, connection resets) are re-attempted, and only a bounded
number of times with exponential backoff.
"""

from dataclasses import dataclass

from github_org_mirror.utils.constants import (
    DEFAULT_LISTING_RETRY_INITIAL_DELAY,
    DEFAULT_LISTING_RETRY_MAX_DELAY,
    DEFAULT_MAX_LISTING_RETRIES,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Describes how many times, and how patiently, a failed request is retried.

    Args:
        max_retries: Maximum number of retry attempts after the first failure (default: 3)
        initial_delay: Delay in seconds before the first retry (default: 1.0)
        max_delay: Maximum delay in seconds between retries (default: 30.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)

    Example:
        policy = RetryPolicy(max_retries=5)
        for attempt in range(policy.max_retries + 1):
            ...
            await asyncio.sleep(policy.delay_for_attempt(attempt))
    """

    max_retries: int = DEFAULT_MAX_LISTING_RETRIES
    initial_delay: float = DEFAULT_LISTING_RETRY_INITIAL_DELAY
    max_delay: float = DEFAULT_LISTING_RETRY_MAX_DELAY
    exponential_base: float = 2.0

    def __post_init__(self) -> None:
        """Reject negative retry counts and delays."""
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be zero or greater, got {self.max_retries}")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays must not be negative")

    def should_retry(self, attempt: int) -> bool:
        """Return whether another attempt is allowed after the zero-based ``attempt`` failed."""
        return attempt < self.max_retries

    def delay_for_attempt(self, attempt: int) -> float:
        """Return the backoff delay to wait after the zero-based ``attempt`` failed."""
        delay = self.initial_delay * (self.exponential_base**attempt)
        return min(delay, self.max_delay)


NO_RETRY = RetryPolicy(max_retries=0)
