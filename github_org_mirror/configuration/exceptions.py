"""Contains exceptions raised when reconciling application configuration."""


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name} (command line option {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class InvalidConfigurationError(Exception):
    """Raised when a configuration element is present but unusable."""

    pass


class GitConfigReadError(Exception):
    """Raised when the git configuration file exists but cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        """Initializes the exception with the path that could not be read."""
        super().__init__(f"Could not read git configuration file {path}: {reason}")
        self.path = path
        self.reason = reason
