"""Absolute deadlines expressed in event loop time.

A mirror run nests three deadlines: the run deadline bounds everything, and
both the per-repository deadline and the per-page listing deadline are
derived from it with ``child`` so neither can outlive the run.
"""

import asyncio
from dataclasses import dataclass
from typing import Self


def _now() -> float:
    return asyncio.get_running_loop().time()


@dataclass(frozen=True)
class Deadline:
    """A point in event loop time after which work must stop."""

    when: float

    @classmethod
    def after(cls, seconds: float) -> Self:
        """Create a deadline ``seconds`` from now."""
        return cls(_now() + seconds)

    def child(self, seconds: float) -> "Deadline":
        """Create a deadline ``seconds`` from now that never extends past this one."""
        return Deadline(min(_now() + seconds, self.when))

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(self.when - _now(), 0.0)

    def expired(self) -> bool:
        """Whether the deadline has passed."""
        return _now() >= self.when
