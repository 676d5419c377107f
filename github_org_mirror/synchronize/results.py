"""Contains results of the repository synchronization workflow."""

from dataclasses import dataclass, field
from enum import Enum

from github_org_mirror.synchronize.models import SyncOperation


class SyncOutcome(Enum):
    """Enum for the outcome of a single repository synchronization."""

    UPDATED = "updated"
    ACQUIRED = "acquired"
    FAILED = "failed"


class ListingOutcome(Enum):
    """Enum for how the organization listing ended."""

    COMPLETED = "completed"
    RATE_LIMITED = "rate_limited"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RepositorySyncResult:
    """Result of one git pull or clone."""

    repository_name: str
    operation: SyncOperation
    outcome: SyncOutcome
    reason: str | None = None
    timed_out: bool = False
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        """Whether the repository was pulled or cloned."""
        return self.outcome is not SyncOutcome.FAILED


@dataclass
class PageReconciliationResult:
    """Results of every repository dispatched from one page.

    ``abandoned`` lists repositories never dispatched because the deadline
    had already expired; ``duplicates`` lists repositories skipped because a
    previous page already dispatched them.
    """

    page_number: int
    results: list[RepositorySyncResult] = field(default_factory=list)
    abandoned: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)


@dataclass
class MirrorRunResult:
    """Contains results of a whole mirror run."""

    pages: list[PageReconciliationResult] = field(default_factory=list)
    listing_outcome: ListingOutcome | None = None
    deadline_exceeded: bool = False

    @property
    def results(self) -> list[RepositorySyncResult]:
        """Every repository result, page by page in dispatch order."""
        return [result for page in self.pages for result in page.results]

    def _with_outcome(self, outcome: SyncOutcome) -> list[RepositorySyncResult]:
        return [result for result in self.results if result.outcome is outcome]

    @property
    def updated(self) -> list[RepositorySyncResult]:
        """Results of successful pulls."""
        return self._with_outcome(SyncOutcome.UPDATED)

    @property
    def acquired(self) -> list[RepositorySyncResult]:
        """Results of successful clones."""
        return self._with_outcome(SyncOutcome.ACQUIRED)

    @property
    def failed(self) -> list[RepositorySyncResult]:
        """Results of failed pulls and clones."""
        return self._with_outcome(SyncOutcome.FAILED)

    @property
    def abandoned(self) -> list[str]:
        """Repositories never dispatched because the run deadline had passed."""
        return [name for page in self.pages for name in page.abandoned]

    @property
    def rate_limited(self) -> bool:
        """Whether listing stopped because of the GitHub rate limit."""
        return self.listing_outcome is ListingOutcome.RATE_LIMITED
