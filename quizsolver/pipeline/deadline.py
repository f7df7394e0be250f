"""Task-level wall-clock budget shared by every suspending stage."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from quizsolver.pipeline.errors import BudgetExceeded


@dataclass(frozen=True)
class Deadline:
    """A fixed budget measured from the moment a task was accepted.

    Stages never own the budget; they receive the deadline, clamp their own
    timeouts with :meth:`clamp` and call :meth:`check` between suspension
    points so a task that has run out of time stops at the next boundary.

    ``clock`` defaults to :func:`time.monotonic`; tests pass a fake.
    """

    budget: float
    started_at: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    @classmethod
    def start(
        cls,
        budget: float,
        started_at: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "Deadline":
        return cls(budget=budget, started_at=clock() if started_at is None else started_at, clock=clock)

    def elapsed(self) -> float:
        return self.clock() - self.started_at

    def remaining(self) -> float:
        return self.budget - self.elapsed()

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def clamp(self, timeout: float) -> float:
        """Return *timeout* shortened to what is left of the budget (never negative)."""
        return max(0.0, min(timeout, self.remaining()))

    def check(self, stage: str = "") -> None:
        """Raise :class:`BudgetExceeded` if the budget is spent."""
        if self.expired:
            where = f" before {stage}" if stage else ""
            raise BudgetExceeded(f"Task budget of {self.budget:.0f}s exhausted{where}")
