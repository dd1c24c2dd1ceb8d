"""Overall time budget for a single request.

A `Deadline` is created per request and checked before each unit of work
(an OCR page, a summarization attempt, a backoff sleep).
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from .errors import DeadlineExceeded


class Deadline:
    """Overall time budget for one request, measured on a monotonic clock."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.seconds = float(seconds)
        self._expires_at = clock() + self.seconds

    @classmethod
    def maybe(cls, seconds: Optional[float]) -> Optional["Deadline"]:
        """Return a Deadline, or None when no positive budget is configured."""
        if seconds is None or seconds <= 0:
            return None
        return cls(seconds)

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self, what: str = "request", needed: float = 0.0) -> None:
        """Raise DeadlineExceeded if less than `needed` seconds remain."""
        remaining = self.remaining()
        if remaining <= 0.0 or remaining < needed:
            raise DeadlineExceeded(
                f"Deadline of {self.seconds:.1f}s exceeded before {what}"
            )


def check_deadline(deadline: Optional[Deadline], what: str, needed: float = 0.0) -> None:
    if deadline is not None:
        deadline.check(what, needed)
