"""Shared constants used across the application."""

# Remote Listing Constants
# ------------------------

MAX_PAGE_SIZE = 100
"""Maximum number of repositories GitHub returns per page of an organization listing."""

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub API URL (override for GitHub Enterprise Server)."""

DEFAULT_PAGE_CHANNEL_SIZE = 10000
"""Number of pages buffered between the lister and the coordinator before the lister blocks."""

# Timeout Constants (seconds)
# ---------------------------

DEFAULT_RUN_TIMEOUT = 300.0
"""Overall time budget for a single mirror run."""

DEFAULT_REPOSITORY_TIMEOUT = 240.0
"""Time budget for a single git pull or clone."""

DEFAULT_LISTING_TIMEOUT = 30.0
"""Time budget for fetching one page of the organization listing."""

# Listing Retry Constants
# -----------------------

DEFAULT_MAX_LISTING_RETRIES = 3
"""Number of times a page is re-requested after a generic listing error."""

DEFAULT_LISTING_RETRY_INITIAL_DELAY = 1.0
DEFAULT_LISTING_RETRY_MAX_DELAY = 30.0

# Exit Codes
# ----------

EXIT_CODE_CONFIGURATION_ERROR = 1
EXIT_CODE_RUN_DEADLINE_EXCEEDED = 2
