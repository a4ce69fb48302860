"""
Domain models for learning entries and their review history.

These are pure data structures with no I/O or external dependencies.
Instances are frozen; state transitions build new instances.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .constants import LABEL_WIDTH


class Difficulty(str, Enum):
    """Self-reported difficulty of a review. Recorded only, never changes the ladder."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Review:
    """
    A single completed review.

    Attributes:
        date: When the review was completed.
        questions: Self-quiz questions written during the review.
        answers: Answers parallel to ``questions``.
        step: The entry's step after this review was applied.
        difficulty: Optional self-reported difficulty.
    """

    date: datetime
    questions: tuple[str, ...] = ()
    answers: tuple[str, ...] = ()
    step: int = 0
    difficulty: Difficulty | None = None


@dataclass(frozen=True)
class LearningEntry:
    """
    One piece of logged knowledge, scheduled on the interval ladder.

    ``created_at`` is the anchor for every due-date calculation and never
    changes. ``step`` is the index of the next interval threshold the entry
    must clear; ``reviews`` is append-only.
    """

    id: str
    sequence_number: int
    content: str
    created_at: datetime
    context: str | None = None
    tags: tuple[str, ...] = ()
    step: int = 0
    reviews: tuple[Review, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        return f"#{self.sequence_number:0{LABEL_WIDTH}d}"

    @property
    def last_reviewed_at(self) -> datetime | None:
        if not self.reviews:
            return None
        return self.reviews[-1].date
