"""Reconciles configuration between CLI arguments, environment variables and ~/.gitconfig."""

from pathlib import Path
from typing import TypeVar, cast

import structlog

from github_org_mirror.configuration.env import Settings
from github_org_mirror.configuration.exceptions import InvalidConfigurationError, RequiredConfigurationElementError
from github_org_mirror.configuration.gitconfig import GITCONFIG_TOKEN_MARKER, GITCONFIG_USER_MARKER, find_gitconfig_value
from github_org_mirror.configuration.models import MirrorConfig, TimeoutConfig
from github_org_mirror.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_LISTING_TIMEOUT,
    DEFAULT_MAX_LISTING_RETRIES,
    DEFAULT_REPOSITORY_TIMEOUT,
    DEFAULT_RUN_TIMEOUT,
)
from github_org_mirror.utils.retry import RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _first_defined(*values: T | None) -> T | None:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _non_empty_repo_dir(value: str | Path | None) -> str | Path | None:
    """Return None for an empty directory value. ``Path("")`` counts as empty, since it normalizes to ``Path(".")``."""
    if value is None:
        return None
    if isinstance(value, Path):
        return value if value != Path("") else None
    return value if value.strip() else None


async def reconcile_mirror_configuration(
    cli_git_user: str | None = None,
    cli_repo_dir: str | Path | None = None,
    cli_github_api_key: str | None = None,
    cli_org: str | None = None,
    cli_github_api_url: str | None = None,
    cli_run_timeout: float | None = None,
    cli_repository_timeout: float | None = None,
    cli_listing_timeout: float | None = None,
    cli_max_listing_retries: int | None = None,
    cli_debug: bool = False,
    settings: Settings | None = None,
    gitconfig_path: Path | None = None,
) -> MirrorConfig:
    """Resolve the mirror configuration.

    Each value is taken from the command line first, then from the
    environment (or a ``.env`` file). The account identity and the API token
    additionally fall back to the ``user =`` and ``token =`` lines of
    ~/.gitconfig.

    Args:
        cli_git_user: GitHub account identity from the command line.
        cli_repo_dir: Local directory holding the mirrored repositories.
        cli_github_api_key: GitHub API token from the command line.
        cli_org: GitHub organization to mirror.
        cli_github_api_url: GitHub API URL, for GitHub Enterprise Server.
        cli_run_timeout: Overall run time budget in seconds.
        cli_repository_timeout: Per-repository git command time budget in seconds.
        cli_listing_timeout: Per-page listing time budget in seconds.
        cli_max_listing_retries: Retries allowed for generic listing errors.
        cli_debug: Whether debug logging was requested.
        settings: Environment settings; read from the environment when omitted.
        gitconfig_path: Alternate git configuration file to fall back to.

    Raises:
        RequiredConfigurationElementError: If a required value is missing after all fallbacks.
        InvalidConfigurationError: If a time budget or retry count is not usable.

    Returns:
        MirrorConfig: The immutable configuration for the run.
    """
    if settings is None:
        settings = Settings()

    git_user = _first_defined(cli_git_user, settings.GIT_USER)
    if git_user is None:
        git_user = find_gitconfig_value(GITCONFIG_USER_MARKER, gitconfig_path)
    if git_user is None:
        raise RequiredConfigurationElementError("GitHub username", "-u/--git-user", "GIT_USER")

    repo_dir = _first_defined(_non_empty_repo_dir(cli_repo_dir), _non_empty_repo_dir(settings.REPO_DIR))
    if repo_dir is None:
        raise RequiredConfigurationElementError("local directory to store git repositories", "-r/--repo-dir", "REPO_DIR")

    github_api_key = _first_defined(cli_github_api_key, settings.GITHUB_API_KEY)
    if github_api_key is None:
        github_api_key = find_gitconfig_value(GITCONFIG_TOKEN_MARKER, gitconfig_path)
    if github_api_key is None:
        raise RequiredConfigurationElementError("GitHub API key", "-a/--github-api-key", "GITHUB_API_KEY")

    org = _first_defined(cli_org, settings.GITHUB_ORG)
    if org is None:
        raise RequiredConfigurationElementError("GitHub organization to query", "-o/--org", "GITHUB_ORG")

    run_timeout = cast(float, _first_defined(cli_run_timeout, settings.RUN_TIMEOUT, DEFAULT_RUN_TIMEOUT))
    repository_timeout = cast(float, _first_defined(cli_repository_timeout, settings.REPOSITORY_TIMEOUT, DEFAULT_REPOSITORY_TIMEOUT))
    listing_timeout = cast(float, _first_defined(cli_listing_timeout, settings.LISTING_TIMEOUT, DEFAULT_LISTING_TIMEOUT))
    for name, value in (
        ("run timeout", run_timeout),
        ("repository timeout", repository_timeout),
        ("listing timeout", listing_timeout),
    ):
        if value <= 0:
            raise InvalidConfigurationError(f"The {name} must be a positive number of seconds, got {value}")

    if repository_timeout > run_timeout:
        logger.warning(
            "Repository timeout exceeds the run timeout, clamping it",
            repository_timeout=repository_timeout,
            run_timeout=run_timeout,
        )
        repository_timeout = run_timeout

    max_listing_retries = cast(int, _first_defined(cli_max_listing_retries, settings.MAX_LISTING_RETRIES, DEFAULT_MAX_LISTING_RETRIES))
    if max_listing_retries < 0:
        raise InvalidConfigurationError(f"The maximum number of listing retries must be zero or greater, got {max_listing_retries}")

    github_api_url = cast(str, _first_defined(cli_github_api_url, settings.GITHUB_API_URL, DEFAULT_GITHUB_API_URL))

    return MirrorConfig(
        git_user=git_user,
        github_api_key=github_api_key,
        repo_dir=Path(repo_dir),
        org=org,
        github_api_url=github_api_url,
        debug=cli_debug or settings.DEBUG,
        timeouts=TimeoutConfig(
            run_timeout=float(run_timeout),
            repository_timeout=float(repository_timeout),
            listing_timeout=float(listing_timeout),
        ),
        listing_retry=RetryPolicy(max_retries=max_listing_retries),
    )
