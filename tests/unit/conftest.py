"""Fixtures for unit tests."""

from pathlib import Path
from typing import Generator

import pytest
import structlog
from structlog.testing import LogCapture


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def log_output() -> Generator[LogCapture, None, None]:
    """Capture structlog events as dictionaries."""
    capture = LogCapture()
    structlog.configure(processors=[capture], cache_logger_on_first_use=False)
    yield capture


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """A local repository directory holding one repository and one stray file."""
    directory = tmp_path / "repos"
    directory.mkdir()
    (directory / "alpha").mkdir()
    (directory / "notes.txt").write_text("not a repository")
    return directory
