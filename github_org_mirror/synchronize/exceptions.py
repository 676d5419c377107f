"""Custom exceptions for the synchronize module."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from github_org_mirror.synchronize.results import MirrorRunResult


class LocalInventoryError(Exception):
    """Raised when the local repository directory cannot be read."""

    def __init__(self, repo_dir: str, reason: str) -> None:
        super().__init__(f"Could not read local repository directory {repo_dir}: {reason}")
        self.repo_dir = repo_dir
        self.reason = reason


class RateLimitExceededError(Exception):
    """Raised when GitHub reports that the API rate limit is exhausted."""

    pass


class PageChannelClosedError(Exception):
    """Raised when a page is published to a channel that has already been closed."""

    pass


class RunDeadlineExceededError(Exception):
    """Raised when the run deadline expires before the page channel is drained."""

    def __init__(self, result: "MirrorRunResult") -> None:
        super().__init__("Run deadline exceeded before all repositories were synchronized")
        self.result = result
