"""Bounded polling policy for asynchronous graph jobs."""

from __future__ import annotations

import time
from dataclasses import dataclass

from graphlink.config import settings


@dataclass(frozen=True)
class PollPolicy:
    """How often and for how long to poll a job.

    ``max_attempts`` and ``timeout`` are independent bounds; ``None`` (or a
    non-positive timeout) leaves that bound off.  ``backoff`` multiplies the
    interval after every non-terminal poll, capped at ``max_interval``.
    """

    interval: float = 0.2
    max_attempts: int | None = None
    timeout: float | None = 600.0
    backoff: float = 1.0
    max_interval: float = 5.0

    @classmethod
    def from_settings(cls) -> PollPolicy:
        return cls(
            interval=settings.poll_interval,
            max_attempts=settings.poll_max_attempts,
            timeout=settings.poll_timeout if settings.poll_timeout > 0 else None,
        )

    def delay(self, attempt: int) -> float:
        """Sleep before poll number ``attempt + 1`` (``attempt`` starts at 1)."""
        return min(self.interval * (self.backoff ** (attempt - 1)), self.max_interval)

    def exhausted(self, attempts: int, started: float) -> bool:
        if self.max_attempts is not None and attempts >= self.max_attempts:
            return True
        if self.timeout is not None and time.monotonic() - started >= self.timeout:
            return True
        return False
