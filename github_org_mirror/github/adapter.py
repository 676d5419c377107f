"""GitHub repository listing adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded
from githubkit.versions.latest.models import MinimalRepository

from github_org_mirror.schemas.repository import RemoteRepository, RepositoryPage
from github_org_mirror.synchronize.exceptions import RateLimitExceededError
from github_org_mirror.utils.constants import DEFAULT_GITHUB_API_URL, MAX_PAGE_SIZE
from github_org_mirror.utils.github import is_rate_limit_response, next_page_from_links

from .abc import RepositoryListingProviderBase
from .client import GitHubClient, get_github_token_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

REPOSITORY_METADATA_FIELDS = ("id", "private", "fork", "visibility", "html_url", "pushed_at", "updated_at")


def handle_github_rate_limit(func: F) -> F:
    """Decorator translating GitHub rate limit rejections into RateLimitExceededError."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as exc:
            retry_after = getattr(exc, "retry_after", None)
            logger.error(
                "GitHub rate limit exceeded",
                function=func.__name__,
                rate_limit_type="primary" if isinstance(exc, PrimaryRateLimitExceeded) else "secondary",
                retry_after=str(retry_after) if retry_after else "unknown",
            )
            raise RateLimitExceededError(f"hit GitHub API rate limit in {func.__name__}") from exc
        except RequestFailed as exc:
            status_code = exc.response.status_code
            headers = {key.lower(): value for key, value in exc.response.headers.items()}
            if is_rate_limit_response(status_code, headers, str(exc)):
                logger.error(
                    "GitHub rate limit exceeded",
                    function=func.__name__,
                    status_code=status_code,
                    rate_limit_reset=headers.get("x-ratelimit-reset"),
                )
                raise RateLimitExceededError(f"hit GitHub API rate limit in {func.__name__}") from exc
            raise

    return wrapper  # type: ignore


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def to_remote_repository(repository: MinimalRepository) -> RemoteRepository:
    """Convert a githubkit repository model into a RemoteRepository."""
    metadata: dict[str, Any] = {}
    for field_name in REPOSITORY_METADATA_FIELDS:
        value = getattr(repository, field_name, None)
        if isinstance(value, str | int | bool) or value is None:
            metadata[field_name] = value
        elif not value:
            # githubkit marks fields absent from the response with a falsy UNSET sentinel
            metadata[field_name] = None
        else:
            metadata[field_name] = str(value)
    return RemoteRepository(
        name=repository.name,
        ssh_url=_string_or_none(getattr(repository, "ssh_url", None)) or "",
        full_name=_string_or_none(getattr(repository, "full_name", None)),
        clone_url=_string_or_none(getattr(repository, "clone_url", None)),
        default_branch=_string_or_none(getattr(repository, "default_branch", None)),
        archived=getattr(repository, "archived", None) is True,
        metadata=metadata,
    )


class GitHubKitAdapter(RepositoryListingProviderBase):
    """GitHub repository listing adapter for the githubkit library."""

    def __init__(self, client: GitHubClient) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client

    @classmethod
    async def create(cls, github_api_key: str, github_api_url: str = DEFAULT_GITHUB_API_URL) -> Self:
        """Create a new GitHub listing adapter.

        Args:
            github_api_key: Personal access token used to authenticate
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance
        """
        logger.info("Creating client for GitHub instance", github_api_url=github_api_url)
        client = await get_github_token_client(github_api_key=github_api_key, github_api_url=github_api_url)
        return cls(client)

    @handle_github_rate_limit
    async def list_organization_repositories(self, org: str, page: int, per_page: int = MAX_PAGE_SIZE) -> RepositoryPage:
        """List one page of the repositories owned by an organization."""
        response: Response[list[MinimalRepository]] = await self.client.rest.repos.async_list_for_org(
            org=org,
            per_page=per_page,
            page=page,
        )
        repositories = tuple(to_remote_repository(repository) for repository in response.parsed_data)
        next_page = next_page_from_links(response.raw_response.links)
        logger.debug(
            "Listed organization repositories",
            org=org,
            page=page,
            repository_count=len(repositories),
            next_page=next_page,
        )
        return RepositoryPage(page_number=page, repositories=repositories, next_page=next_page)
