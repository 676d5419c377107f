"""Reads fallback credentials from the user's ~/.gitconfig file."""

from pathlib import Path

import structlog

from github_org_mirror.configuration.exceptions import GitConfigReadError

logger = structlog.get_logger(__name__)

GITCONFIG_USER_MARKER = "user ="
GITCONFIG_TOKEN_MARKER = "token ="


def default_gitconfig_path() -> Path | None:
    """Return the path of the current user's ~/.gitconfig, or None if there is no home directory."""
    try:
        return Path.home() / ".gitconfig"
    except RuntimeError:
        logger.warning("Could not determine the user's home directory")
        return None


def parse_gitconfig_line(line: str) -> str:
    """Return the stripped value following the first '=' of a gitconfig line."""
    _, _, value = line.partition("=")
    return value.strip()


def find_gitconfig_value(marker: str, gitconfig_path: Path | None = None) -> str | None:
    """Find the value of the first line of ~/.gitconfig containing ``marker``.

    Matching is a plain substring match, so ``"user ="`` matches
    ``user = octocat`` wherever it appears in the file.

    Args:
        marker: Substring identifying the line, e.g. ``"token ="``.
        gitconfig_path: Path to read instead of ~/.gitconfig.

    Raises:
        GitConfigReadError: If the file exists but cannot be read.

    Returns:
        The value, or None if the file or a non-empty matching line does not exist.
    """
    path = gitconfig_path if gitconfig_path is not None else default_gitconfig_path()
    if path is None:
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No git configuration file found", path=str(path))
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise GitConfigReadError(str(path), str(exc)) from exc

    for line in content.splitlines():
        if marker in line:
            value = parse_gitconfig_line(line)
            return value or None
    return None
