"""Immutable configuration resolved once before a mirror run starts."""

from dataclasses import dataclass, field
from pathlib import Path

from github_org_mirror.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_LISTING_TIMEOUT,
    DEFAULT_REPOSITORY_TIMEOUT,
    DEFAULT_RUN_TIMEOUT,
)
from github_org_mirror.utils.retry import RetryPolicy


@dataclass(frozen=True)
class TimeoutConfig:
    """Time budgets, in seconds, for the nested deadlines of a run."""

    run_timeout: float = DEFAULT_RUN_TIMEOUT
    repository_timeout: float = DEFAULT_REPOSITORY_TIMEOUT
    listing_timeout: float = DEFAULT_LISTING_TIMEOUT


@dataclass(frozen=True)
class MirrorConfig:
    """Configuration for the GitHub organization mirror CLI."""

    git_user: str
    github_api_key: str = field(repr=False)
    repo_dir: Path
    org: str
    github_api_url: str = DEFAULT_GITHUB_API_URL
    debug: bool = False
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    listing_retry: RetryPolicy = field(default_factory=RetryPolicy)
