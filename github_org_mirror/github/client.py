"""Sets up the authenticated githubkit client."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy

from github_org_mirror.utils.constants import DEFAULT_GITHUB_API_URL

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy]


async def get_github_token_client(github_api_key: str, github_api_url: str = DEFAULT_GITHUB_API_URL) -> GitHubClient:
    """Returns an authenticated GitHub client using an API token.

    Supports custom base URL for GitHub Enterprise Server (GHES). Automatic
    retries are disabled so that rate limit rejections reach the lister,
    which stops listing instead of waiting for the limit to reset.
    """
    if not github_api_key:
        raise RuntimeError("GitHub token authentication requires a GitHub API key.")
    # Disable HTTP caching to always get fresh data
    return GitHub(
        auth=TokenAuthStrategy(github_api_key),
        base_url=github_api_url,
        http_cache=False,
        auto_retry=False,
    )
