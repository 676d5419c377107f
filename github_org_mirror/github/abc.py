"""Base ABC for GitHub repository listing providers."""

from abc import ABC, abstractmethod

from github_org_mirror.schemas.repository import RepositoryPage
from github_org_mirror.utils.constants import MAX_PAGE_SIZE


class RepositoryListingProviderBase(ABC):
    """Base ABC for anything that can list an organization's repositories one page at a time."""

    @abstractmethod
    async def list_organization_repositories(self, org: str, page: int, per_page: int = MAX_PAGE_SIZE) -> RepositoryPage:
        """List one page of repositories owned by an organization.

        Raises:
            RateLimitExceededError: If the remote service rejected the request because of its rate limit.
        """
        pass
