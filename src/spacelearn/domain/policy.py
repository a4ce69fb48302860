"""Interval ladder policy."""

from collections.abc import Iterable
from dataclasses import dataclass

from .constants import INTERVALS


@dataclass(frozen=True)
class IntervalPolicy:
    """
    Ordered table of elapsed-day thresholds, indexed by step.

    An entry at step ``i`` is due once ``intervals[i]`` whole calendar days
    have passed since its creation day. Steps past the end of the table are
    clamped to the last index.
    """

    intervals: tuple[int, ...] = INTERVALS

    def __post_init__(self):
        intervals = tuple(self.intervals)
        if not intervals:
            raise ValueError("interval table must not be empty")
        if any(i <= 0 for i in intervals):
            raise ValueError(f"intervals must be positive day counts: {intervals}")
        if any(b < a for a, b in zip(intervals, intervals[1:])):
            raise ValueError(f"intervals must be non-decreasing: {intervals}")
        object.__setattr__(self, "intervals", intervals)

    @classmethod
    def from_days(cls, days: Iterable[int]) -> "IntervalPolicy":
        return cls(tuple(int(d) for d in days))

    @property
    def max_step(self) -> int:
        return len(self.intervals) - 1

    def clamp(self, step: int) -> int:
        return max(0, min(step, self.max_step))

    def threshold(self, step: int) -> int:
        """Days that must have elapsed since creation for an entry at ``step`` to be due."""
        return self.intervals[self.clamp(step)]

    def next_step(self, step: int) -> int:
        """Step after one more completed review. Never moves backwards."""
        return max(self.clamp(step), min(step + 1, self.max_step))


DEFAULT_POLICY = IntervalPolicy()
