"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio

import typer
from typer import Option
from typing_extensions import Annotated

from github_org_mirror.configuration.exceptions import GitConfigReadError, InvalidConfigurationError, RequiredConfigurationElementError
from github_org_mirror.configuration.models import MirrorConfig
from github_org_mirror.configuration.reconcile import reconcile_mirror_configuration
from github_org_mirror.synchronize.driver import run_mirror_workflow
from github_org_mirror.synchronize.exceptions import LocalInventoryError, RunDeadlineExceededError
from github_org_mirror.synchronize.results import MirrorRunResult
from github_org_mirror.utils.constants import EXIT_CODE_CONFIGURATION_ERROR, EXIT_CODE_RUN_DEADLINE_EXCEEDED
from github_org_mirror.utils.logging import configure_logging

typer_app = typer.Typer(pretty_exceptions_show_locals=False, add_completion=False)


def echo_summary(result: MirrorRunResult) -> None:
    """Print a short summary of a mirror run."""
    typer.echo("")
    typer.echo("=" * 70)
    typer.echo("MIRROR SUMMARY")
    typer.echo("=" * 70)
    typer.echo(f"Pages reconciled: {len(result.pages)}")
    typer.echo(f"Repositories updated: {len(result.updated)}")
    typer.echo(f"Repositories acquired: {len(result.acquired)}")
    typer.echo(f"Repositories failed: {len(result.failed)}")
    for failed in result.failed:
        typer.echo(f"  - {failed.repository_name} ({failed.operation.value}): {failed.reason}")
    if result.abandoned:
        typer.echo(f"Repositories abandoned: {len(result.abandoned)}")
    if result.rate_limited:
        typer.echo("Listing stopped early: GitHub API rate limit exceeded")
    typer.echo("=" * 70)


@typer_app.command(name="sync")
def sync_cli(
    git_user: Annotated[str | None, Option("-u", "--git-user", help="GitHub username. Falls back to GIT_USER, then ~/.gitconfig.")] = None,
    repo_dir: Annotated[str | None, Option("-r", "--repo-dir", help="Directory to download git repos into. Falls back to REPO_DIR.")] = None,
    github_api_key: Annotated[
        str | None, Option("-a", "--github-api-key", help="GitHub API key. Falls back to GITHUB_API_KEY, then ~/.gitconfig.")
    ] = None,
    org: Annotated[str | None, Option("-o", "--org", help="GitHub organization to query. Falls back to GITHUB_ORG.")] = None,
    github_api_url: Annotated[str | None, Option("--github-api-url", help="GitHub API URL. Falls back to GITHUB_API_URL.")] = None,
    run_timeout: Annotated[float | None, Option("--run-timeout", help="Seconds allowed for the whole run (default 300).")] = None,
    repository_timeout: Annotated[
        float | None, Option("--repository-timeout", help="Seconds allowed for each git pull or clone (default 240).")
    ] = None,
    listing_timeout: Annotated[float | None, Option("--listing-timeout", help="Seconds allowed for each page of the listing (default 30).")] = None,
    max_listing_retries: Annotated[
        int | None, Option("--max-listing-retries", help="Retries for a page after a generic listing error (default 3).")
    ] = None,
    debug: Annotated[bool, Option("--debug", help="Enable debug logging.")] = False,
) -> None:
    """Clone or pull every repository of a GitHub organization into a local directory."""
    try:
        config: MirrorConfig = asyncio.run(
            reconcile_mirror_configuration(
                cli_git_user=git_user,
                cli_repo_dir=repo_dir,
                cli_github_api_key=github_api_key,
                cli_org=org,
                cli_github_api_url=github_api_url,
                cli_run_timeout=run_timeout,
                cli_repository_timeout=repository_timeout,
                cli_listing_timeout=listing_timeout,
                cli_max_listing_retries=max_listing_retries,
                cli_debug=debug,
            )
        )
    except (RequiredConfigurationElementError, InvalidConfigurationError, GitConfigReadError) as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(EXIT_CODE_CONFIGURATION_ERROR) from exc

    configure_logging(debug=config.debug)

    try:
        result = asyncio.run(run_mirror_workflow(config))
    except LocalInventoryError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(EXIT_CODE_CONFIGURATION_ERROR) from exc
    except RunDeadlineExceededError as exc:
        echo_summary(exc.result)
        typer.echo(f"{exc}, exiting...", err=True)
        raise typer.Exit(EXIT_CODE_RUN_DEADLINE_EXCEEDED) from exc

    echo_summary(result)


if __name__ == "__main__":
    typer_app()
